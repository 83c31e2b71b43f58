"""GraphQL documents understood by the Coda daemon.

The client treats these as opaque strings. Subscription documents are keyed
by the event type name used in the event registry.
"""

# =============================================================================
# Subscriptions
# =============================================================================

NEW_BLOCK_SUBSCRIPTION = """subscription {
  newBlock {
    creator
    stateHash
    protocolState {
      previousStateHash
      blockchainState { date snarkedLedgerHash stagedLedgerHash }
      consensusState { blockHeight epoch slot }
    }
    transactions {
      userCommands { id from to amount fee memo isDelegation nonce }
      feeTransfer { recipient fee }
      coinbase
    }
  }
}"""

SYNC_UPDATE_SUBSCRIPTION = "subscription { newSyncUpdate }"

BLOCK_CONFIRMATION_SUBSCRIPTION = """subscription {
  blockConfirmation { stateHash numConfirmations }
}"""

NEW_BLOCK = "NewBlock"
SYNC_UPDATE = "SyncUpdate"
BLOCK_CONFIRMATION = "BlockConfirmation"

SUBSCRIPTION_QUERIES: dict[str, str] = {
    NEW_BLOCK: NEW_BLOCK_SUBSCRIPTION,
    SYNC_UPDATE: SYNC_UPDATE_SUBSCRIPTION,
    BLOCK_CONFIRMATION: BLOCK_CONFIRMATION_SUBSCRIPTION,
}

# =============================================================================
# Daemon queries
# =============================================================================

DAEMON_STATUS_QUERY = """query {
  daemonStatus {
    numAccounts
    blockchainLength
    highestBlockLengthReceived
    uptimeSecs
    ledgerMerkleRoot
    stateHash
    commitId
    confDir
    peers
    userCommandsSent
    runSnarkWorker
    syncStatus
    consensusTimeNow { epoch slot globalSlot startTime endTime }
    consensusTimeBestTip { epoch slot globalSlot startTime endTime }
    consensusMechanism
  }
}"""

DAEMON_VERSION_QUERY = "query { version }"

SYNC_STATUS_QUERY = "query { syncStatus }"

# =============================================================================
# Wallets
# =============================================================================

GET_WALLETS_QUERY = """query {
  ownedWallets { publicKey balance { total } }
}"""

GET_WALLET_QUERY = """query ($publicKey: PublicKey!) {
  wallet(publicKey: $publicKey) {
    publicKey
    balance { total unknown }
    nonce
    receiptChainHash
    delegate
    votingFor
    stakingActive
    privateKeyPath
  }
}"""

UNLOCK_WALLET_QUERY = """mutation ($publicKey: PublicKey!, $password: String!) {
  unlockWallet(input: {publicKey: $publicKey, password: $password}) {
    account { publicKey balance { total } }
  }
}"""

CREATE_WALLET_QUERY = """mutation ($password: String!) {
  createAccount(input: {password: $password}) { publicKey }
}"""

# =============================================================================
# Payments
# =============================================================================

SEND_PAYMENT_QUERY = """mutation ($from: PublicKey!, $to: PublicKey!, $amount: UInt64!,
          $fee: UInt64!, $memo: String) {
  sendPayment(input: {from: $from, to: $to, amount: $amount, fee: $fee, memo: $memo}) {
    payment { id nonce from to amount fee memo }
  }
}"""

GET_POOLED_PAYMENTS_QUERY = """query ($publicKey: PublicKey!) {
  pooledUserCommands(publicKey: $publicKey) {
    id from to amount fee memo isDelegation nonce
  }
}"""

GET_TRANSACTION_STATUS_QUERY = """query ($paymentId: ID!) {
  transactionStatus(payment: $paymentId)
}"""

# =============================================================================
# Snark worker
# =============================================================================

SET_SNARK_WORKER_QUERY = """mutation ($worker_pk: PublicKey, $fee: UInt64!) {
  setSnarkWorker(input: {publicKey: $worker_pk}) { lastSnarkWorker }
  setSnarkWorkFee(input: {fee: $fee}) { lastFee }
}"""

GET_CURRENT_SNARK_WORKER_QUERY = """query {
  currentSnarkWorker { key fee }
}"""
