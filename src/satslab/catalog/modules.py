"""Module catalog — static course content.

Questions, tasks and badges of each module. Content is built once at import
time and exposed read-only through ``list_modules`` / ``get_module``.
"""

from __future__ import annotations

from satslab.learning.models import (
    BadgeTemplate,
    ExternalLink,
    LearningModule,
    Question,
    Task,
)
from satslab.validation.profiles import LIGHTNING_PROFILE, SIGNET_PROFILE
from satslab.validation.result import ValidationKind

MEMPOOL_SIGNET = ExternalLink(label="Signet Explorer", url="https://mempool.space/signet")

MODULE_SEED_DATA: list[LearningModule] = [
    # 1: Introduction
    LearningModule(
        id=1,
        title="Bitcoin and Signet Introduction",
        description="Learn the fundamental concepts of Bitcoin and explore the Signet network",
        objectives=(
            "Understand what a blockchain is and how it works",
            "Know the difference between mainnet, testnet, and Signet",
            "Explore transactions using mempool.space",
            "Interpret Bitcoin transaction data",
            "Understand the role of faucets in the Signet network",
        ),
        requires_login=False,
        estimated_minutes=30,
        difficulty="Beginner",
        validation_profile=SIGNET_PROFILE,
        questions=(
            Question(
                id="1",
                question="What is a blockchain?",
                options=(
                    "A type of cryptocurrency",
                    "Mining software",
                    "A distributed and immutable ledger",
                    "A digital wallet",
                ),
                correct_answer=2,
                explanation=(
                    "A blockchain is a distributed ledger that records transactions chronologically "
                    "and immutably. Each block is linked to the previous one through cryptography."
                ),
            ),
            Question(
                id="2",
                question="What is the main difference between mainnet and Signet?",
                options=(
                    "Signet is faster than mainnet",
                    "Mainnet uses real Bitcoin, Signet uses test Bitcoin",
                    "Signet has higher fees",
                    "There is no significant difference",
                ),
                correct_answer=1,
                explanation=(
                    "Mainnet carries Bitcoin with real economic value. Signet is a test network whose "
                    "coins (sBTC) have no value and exist for experimentation."
                ),
            ),
            Question(
                id="3",
                question="What is a faucet on the Signet network?",
                options=(
                    "A special type of wallet",
                    "A service that distributes free sBTC for testing",
                    "A block explorer",
                    "A mining protocol",
                ),
                correct_answer=1,
                explanation="A faucet hands out small amounts of test coins so anyone can practice without risk.",
            ),
            Question(
                id="4",
                question="Why is blockchain transparency important?",
                options=(
                    "To speed up transactions",
                    "To allow independent auditing and verification",
                    "To reduce fees",
                    "To facilitate mining",
                ),
                correct_answer=1,
                explanation=(
                    "Anyone can verify transactions independently, without trusting a central authority."
                ),
            ),
        ),
        tasks=(
            Task(
                id="1",
                title="Explore Signet Mempool",
                description="Access the mempool.space/signet explorer and find a recent transaction.",
                instructions=(
                    "Go to https://mempool.space/signet",
                    "Observe the recent blocks on the homepage",
                    "Click on a listed transaction (tx)",
                    "Copy the transaction hash (64 hexadecimal characters)",
                ),
                input_label="Transaction hash",
                input_placeholder="Paste the transaction hash here (e.g., a1b2c3d4...)",
                validation_type=ValidationKind.TRANSACTION,
                hints=(
                    "The hash is a 64-character sequence (numbers and letters)",
                    "You can find transactions in the 'Recent Transactions' list",
                    "Make sure you're on mempool.space/signet (not the main one)",
                ),
                external_links=(MEMPOOL_SIGNET,),
            ),
            Task(
                id="2",
                title="Interpret a Transaction",
                description="Choose any new transaction in the explorer and identify the transferred values.",
                instructions=(
                    "Go to mempool.space/signet and choose a different transaction from the previous one",
                    "On the transaction page, locate the 'Outputs' section",
                    "Add up all the values listed in the outputs",
                    "Enter the total sum of all outputs",
                ),
                input_label="Total of outputs (sBTC)",
                input_placeholder="Total sum of outputs in sBTC (e.g., 0.06)",
                validation_type=ValidationKind.AMOUNT,
                hints=(
                    "This is a different transaction from the first task - choose any new one",
                    "Add up all values in the 'Outputs' section, not just the largest",
                    "Total outputs = input minus network fee",
                    "Example: Output 1 (0.01) + Output 2 (0.02) = Total (0.03)",
                    "Use decimal point, not comma (0.05 not 0,05)",
                ),
                external_links=(MEMPOOL_SIGNET,),
            ),
        ),
        badge=BadgeTemplate(
            name="Beginner Explorer",
            description="Completed Bitcoin introduction and explored your first transaction on Signet",
            image_url="/badges/explorer-beginner.png",
        ),
    ),
    # 2: Security and wallets
    LearningModule(
        id=2,
        title="Security and Wallets",
        description="Learn about private keys, wallet security, and creating Bitcoin addresses",
        objectives=(
            "Understand the importance of private keys",
            "Learn to protect seed phrases",
            "Generate your first Bitcoin wallet on Signet",
            "Know the difference between hot wallets and cold wallets",
        ),
        requires_login=True,
        estimated_minutes=45,
        difficulty="Beginner",
        validation_profile=SIGNET_PROFILE,
        questions=(
            Question(
                id="1",
                question="What is the main function of a private key?",
                options=(
                    "Receive Bitcoin from other users",
                    "Sign transactions and prove ownership",
                    "Speed up transaction confirmation",
                    "Reduce transaction fees",
                ),
                correct_answer=1,
                explanation="The private key signs transactions, proving you may spend the associated coins.",
            ),
            Question(
                id="2",
                question="Why is it important to protect a seed phrase?",
                options=(
                    "To speed up wallet synchronization",
                    "To reduce transaction fees",
                    "Because it controls access to all your funds",
                    "To facilitate transaction backups",
                ),
                correct_answer=2,
                explanation="The seed phrase can regenerate every private key of the wallet.",
            ),
            Question(
                id="3",
                question="What is the difference between hot wallet and cold wallet?",
                options=(
                    "Hot wallets are more expensive than cold wallets",
                    "Cold wallets only work with Bitcoin, hot wallets accept various coins",
                    "Hot wallets are online, cold wallets are offline",
                    "There is no significant difference between them",
                ),
                correct_answer=2,
                explanation="Hot wallets are connected to the internet; cold wallets stay offline.",
            ),
        ),
        tasks=(
            Task(
                id="1",
                title="Generate Signet Wallet",
                description="Create your first wallet on Signet and get free sBTC from the faucet.",
                instructions=(
                    "Use the wallet generator to create a new Signet wallet",
                    "Copy the generated address (starts with 'tb1')",
                    "Access a Signet faucet and request sBTC for your address",
                    "Wait a few minutes and verify that you received the funds",
                ),
                input_label="Signet address",
                input_placeholder="Paste your Signet wallet address here (tb1...)",
                validation_type=ValidationKind.ADDRESS,
                hints=(
                    "Signet addresses start with 'tb1' (bech32)",
                    "Keep your seed phrase in a safe place - you'll need it later",
                    "Faucets may take a few minutes to send",
                    "You can verify receipt at mempool.space/signet",
                ),
                external_links=(
                    ExternalLink(label="Signet Faucet", url="https://signet.bc-2.jp/"),
                    MEMPOOL_SIGNET,
                ),
            ),
            Task(
                id="2",
                title="Verify Faucet Transaction",
                description="Use the explorer to verify that the faucet sent sBTC to your wallet.",
                instructions=(
                    "Request sBTC for your wallet from the faucet",
                    "Wait for the transaction to be broadcast",
                    "Copy the transaction hash (TXID)",
                    "Paste the TXID in the field below to complete the task",
                ),
                input_label="Faucet transaction hash",
                input_placeholder="Paste the transaction hash you received from the faucet (64 characters)",
                validation_type=ValidationKind.TRANSACTION,
                hints=(
                    "The faucet may take a few minutes to send",
                    "Look for incoming transactions to your address",
                    "The transaction hash has exactly 64 hexadecimal characters",
                ),
                external_links=(MEMPOOL_SIGNET,),
            ),
        ),
        badge=BadgeTemplate(
            name="Key Guardian",
            description="Mastered Bitcoin security fundamentals and created your first wallet",
            image_url="/badges/key-guardian.png",
        ),
    ),
    # 3: Transactions
    LearningModule(
        id=3,
        title="Transactions on Signet",
        description="Learn to create and send Bitcoin transactions, understand fees and use OP_RETURN",
        objectives=(
            "Understand how transaction fees work",
            "Learn the relationship between fees and confirmation time",
            "Practice sending transactions on Signet",
            "Discover what OP_RETURN is and what it is used for",
            "Create your first transaction carrying custom data",
        ),
        requires_login=True,
        estimated_minutes=45,
        difficulty="Intermediate",
        validation_profile=SIGNET_PROFILE,
        questions=(
            Question(
                id="1",
                question="What is a transaction fee in Bitcoin?",
                options=(
                    "A tax charged by the government",
                    "A fixed fee set by the network",
                    "An incentive for miners to include the transaction in a block",
                    "A penalty for using the network",
                ),
                correct_answer=2,
                explanation="Fees reward miners for including your transaction. Higher fees are more attractive.",
            ),
            Question(
                id="2",
                question="How do fees affect confirmation time?",
                options=(
                    "Higher fees speed up confirmation",
                    "Lower fees speed up confirmation",
                    "Fees do not affect confirmation time",
                    "Only the transaction size matters",
                ),
                correct_answer=0,
                explanation="Miners prioritize higher fees; in busy periods low-fee transactions can wait for days.",
            ),
            Question(
                id="3",
                question="What is OP_RETURN used for in Bitcoin transactions?",
                options=(
                    "To cancel transactions",
                    "To store small pieces of data on the blockchain",
                    "To speed up confirmations",
                    "To reduce transaction fees",
                ),
                correct_answer=1,
                explanation="OP_RETURN embeds up to 80 bytes of data, used for timestamps, certificates and messages.",
            ),
        ),
        tasks=(
            Task(
                id="1",
                title="Send a Transaction with Fee Selection",
                description="Send 0.005 sBTC to another address using one of the fee levels.",
                instructions=(
                    "Use your Signet wallet from the previous module",
                    "Enter the destination address: tb1qw508d6qejxtdg4y5r3zarvary0c5xw7kxpjzsx",
                    "Set the amount: 0.005 sBTC",
                    "Pick a fee level: High (10 sat/vB), Medium (5 sat/vB) or Low (2 sat/vB)",
                    "Send the transaction and copy its transaction ID",
                ),
                input_label="Transaction ID",
                input_placeholder="Paste the transaction ID (txid) here",
                validation_type=ValidationKind.TRANSACTION,
                hints=(
                    "Use the explorer to check that the transaction was sent",
                    "High fees are processed faster",
                    "The transaction ID has 64 hexadecimal characters",
                    "You can follow the confirmation on mempool.space/signet",
                ),
                external_links=(MEMPOOL_SIGNET,),
            ),
            Task(
                id="2",
                title="Create an OP_RETURN Transaction",
                description="Create a transaction that carries the message 'I love Bitcoin' in an OP_RETURN output.",
                instructions=(
                    "Open the OP_RETURN transaction builder",
                    "Type the message: 'I love Bitcoin'",
                    "Select a suitable fee (5 sat/vB recommended)",
                    "Review the data that will be written to the blockchain",
                    "Send the transaction and copy its ID",
                ),
                input_label="OP_RETURN transaction ID",
                input_placeholder="Paste the OP_RETURN transaction ID here",
                validation_type=ValidationKind.TRANSACTION,
                hints=(
                    "OP_RETURN makes the output unspendable",
                    "Your message stays on the blockchain permanently",
                    "The cost is minimal (only the transaction fee)",
                    "Use the explorer to inspect the transaction data",
                ),
                external_links=(MEMPOOL_SIGNET,),
            ),
        ),
        badge=BadgeTemplate(
            name="Blockchain Messenger",
            description="Sent transactions and wrote data permanently to the Bitcoin blockchain",
            image_url="/badges/blockchain-messenger.png",
        ),
    ),
    # 4: Mining
    LearningModule(
        id=4,
        title="Bitcoin Mining",
        description="Learn how Bitcoin mining works and simulate the proof-of-work process",
        objectives=(
            "Understand the proof-of-work concept",
            "See the role miners play in securing the network",
            "Simulate mining with the SHA-256 algorithm",
            "Explore mining pools and rewards",
            "Analyze the relationship between difficulty and block time",
        ),
        requires_login=True,
        estimated_minutes=45,
        difficulty="Intermediate",
        validation_profile=SIGNET_PROFILE,
        questions=(
            Question(
                id="1",
                question="What is proof of work in Bitcoin?",
                options=(
                    "A voting system for users",
                    "A way to validate identities",
                    "A computational process to find new blocks",
                    "A coin distribution mechanism",
                ),
                correct_answer=2,
                explanation="Miners spend computing power to find a hash that meets the network difficulty.",
            ),
            Question(
                id="2",
                question="How do transaction fees benefit miners?",
                options=(
                    "They reduce the cost of mining",
                    "They increase block speed",
                    "They provide an extra reward for including transactions",
                    "They lower the network difficulty",
                ),
                correct_answer=2,
                explanation="Besides the block subsidy, miners collect the fees of every transaction they include.",
            ),
        ),
        tasks=(
            Task(
                id="1",
                title="Mining Simulator",
                description="Use the simulator to find a valid hash at low difficulty (4 leading zeros).",
                instructions=(
                    "Start the mining simulator",
                    "Watch the trial-and-error process of the algorithm",
                    "Wait until a hash starting with '0000' is found",
                    "Note how many attempts (nonce) it took",
                ),
                input_label="Block hash",
                input_placeholder="Hash found by the simulator",
                validation_type=ValidationKind.TRANSACTION,
                hints=(
                    "The process may take a few seconds depending on luck",
                    "Each attempt produces a different hash by incrementing the nonce",
                    "A valid hash must start with '0000' (4 zeros)",
                ),
            ),
            Task(
                id="2",
                title="Pool Mining Simulation",
                description="Join a pool mining simulation for 5 minutes and watch the rewards.",
                instructions=(
                    "Start the pool mining simulation",
                    "Contribute hashrate for 5 minutes",
                    "Watch your percentage share of the pool",
                    "Note the rewards you received proportionally",
                ),
                input_label="Total reward",
                input_placeholder="Total reward in sBTC (e.g. 0.001)",
                validation_type=ValidationKind.AMOUNT,
                hints=(
                    "Pools split rewards according to contributed hashrate",
                    "Even small contributions receive regular rewards",
                    "The simulation speeds up the real mining process",
                ),
            ),
        ),
        badge=BadgeTemplate(
            name="Mining Apprentice",
            description="Completed the mining simulations and understood proof-of-work",
            image_url="/badges/mining-apprentice.png",
        ),
    ),
    # 5: Lightning
    LearningModule(
        id=5,
        title="Lightning Network",
        description="Learn about the Lightning Network and make instant Bitcoin transactions",
        objectives=(
            "Understand the concept of scalability layers",
            "Make Lightning payments on the Signet network",
            "Understand channels and payment routing",
            "Analyze differences between on-chain and Lightning fees",
        ),
        requires_login=True,
        estimated_minutes=60,
        difficulty="Intermediate",
        validation_profile=LIGHTNING_PROFILE,
        questions=(
            Question(
                id="1",
                question="What is the Lightning Network?",
                options=(
                    "A Bitcoin fork",
                    "A scalability layer for Bitcoin",
                    "A new mining protocol",
                    "A Bitcoin wallet",
                ),
                correct_answer=1,
                explanation="Lightning is a layer-2 network of off-chain payment channels.",
            ),
            Question(
                id="2",
                question="How do Lightning fees differ from on-chain fees?",
                options=(
                    "They are always identical",
                    "Lightning has higher fees",
                    "Lightning has lower fees, based on routing",
                    "Lightning has no fees",
                ),
                correct_answer=2,
                explanation="Lightning fees depend on routing and are usually far below on-chain fees.",
            ),
        ),
        tasks=(
            Task(
                id="1",
                title="Generate Invoice in Integrated Wallet",
                description="Use the integrated Lightning wallet to generate an invoice and receive a payment.",
                instructions=(
                    "Go to the 'Receive' section of the wallet",
                    "Enter an amount in satoshis (e.g., 1000)",
                    "Click 'Generate Invoice'",
                    "Copy the generated invoice",
                ),
                input_label="Lightning invoice",
                input_placeholder="Generated Lightning invoice (e.g., lnbc1000u1p...)",
                validation_type=ValidationKind.ADDRESS,
                hints=(
                    "The integrated wallet simulates receipt automatically",
                    "Copy the generated invoice for validation",
                ),
            ),
            Task(
                id="2",
                title="Send Lightning Payment",
                description="Send satoshis through the integrated wallet.",
                instructions=(
                    "Go to the 'Send' section of the wallet",
                    "Paste an invoice and click 'Send Payment'",
                    "Copy the payment hash from the payment history",
                ),
                input_label="Payment hash",
                input_placeholder="Lightning transaction hash or preimage",
                validation_type=ValidationKind.TRANSACTION,
                hints=(
                    "First generate an invoice in the 'Receive' section or use a valid invoice",
                    "The hash will appear in payment history",
                ),
            ),
            Task(
                id="3",
                title="Simulate Lightning Channel",
                description="Use the channel simulator to understand how Lightning channels work.",
                instructions=(
                    "Open the Lightning channel simulator",
                    "Set the channel capacity and open the channel",
                    "Note the 'Estimated Closing Fee' displayed",
                ),
                input_label="Estimated closing fee (sats)",
                input_placeholder="Estimated closing fee in satoshis",
                validation_type=ValidationKind.AMOUNT,
                hints=(
                    "Closing fee is based on channel capacity (approx. 0.1%)",
                    "Look for the 'Estimated Closing Fee' section",
                ),
                fee_field=True,
            ),
        ),
        badge=BadgeTemplate(
            name="Lightning Fast",
            description="Mastered the Lightning Network and performed instant transactions",
            image_url="/badges/lightning-fast.png",
        ),
    ),
]

MODULES: dict[int, LearningModule] = {m.id: m for m in MODULE_SEED_DATA}


def list_modules() -> list[LearningModule]:
    """All modules ordered by id."""
    return [MODULES[k] for k in sorted(MODULES)]


def get_module(module_id: int) -> LearningModule | None:
    return MODULES.get(module_id)
