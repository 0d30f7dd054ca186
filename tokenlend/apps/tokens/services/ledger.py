"""
Ledger Client
Web3 access to the chain that holds the lending tokens: native balances,
faucet top-ups, token deployment, minting, transfers and confirmation.
"""

from web3 import Web3
from web3.contract import Contract
from web3.exceptions import ContractLogicError, TransactionNotFound
from eth_account import Account
from eth_account.signers.local import LocalAccount
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any, List
from django.conf import settings
import logging
import json
import time

from tokenlend.errors import (
    LedgerError,
    TransactionExpiredError,
    TransactionFailedError,
)
from tokenlend.utils import same_address

logger = logging.getLogger(__name__)

NATIVE_TRANSFER_GAS = 21000


@dataclass(frozen=True)
class MintInfo:
    """On-chain state of a token contract."""

    address: str
    decimals: int
    supply: int
    mint_authority: Optional[str]


@dataclass(frozen=True)
class HoldingAccount:
    address: str
    mint: str
    owner: str


@dataclass(frozen=True)
class LatestBlock:
    block_hash: str
    block_number: int
    last_valid_block_number: int


class LedgerClient:
    """Web3 client for the lending token contracts"""

    def __init__(
        self,
        provider_url: Optional[str] = None,
        abi_path: Optional[str] = None,
        artifact_path: Optional[str] = None,
        faucet_private_key: Optional[str] = None,
        web3: Optional[Web3] = None,
    ):
        """
        Initialize the ledger client

        Args:
            provider_url: Optional Web3 provider URL (defaults to settings)
            abi_path: Path to the token ABI JSON file (defaults to settings)
            artifact_path: Path to the compiled token artifact holding the
                deploy bytecode (defaults to settings)
            faucet_private_key: Key of the account that funds the authority
            web3: Pre-built Web3 instance; skips provider construction
        """
        self.provider_url = provider_url or settings.WEB3_PROVIDER_URL
        self.web3 = web3 or Web3(Web3.HTTPProvider(self.provider_url))

        if not self.web3.is_connected():
            raise ConnectionError(
                f"Failed to connect to Web3 provider: {self.provider_url}"
            )

        # Load ABI
        with open(abi_path or settings.LENDING_TOKEN_ABI_PATH, "r") as f:
            self.token_abi: List[Dict[str, Any]] = json.load(f)

        self.artifact_path = Path(artifact_path or settings.LENDING_TOKEN_ARTIFACT_PATH)
        if faucet_private_key is None:
            faucet_private_key = settings.FAUCET_PRIVATE_KEY
        self.faucet_private_key = faucet_private_key

        logger.info(f"Initialized ledger client on {self.provider_url}")

    def checksum_address(self, address: str) -> str:
        """Convert address to checksum format"""
        return Web3.to_checksum_address(address)

    def token_contract(self, address: str) -> Contract:
        return self.web3.eth.contract(
            address=self.checksum_address(address), abi=self.token_abi
        )

    def load_token_bytecode(self) -> str:
        try:
            with open(self.artifact_path, "r") as f:
                artifact = json.load(f)
        except FileNotFoundError:
            raise LedgerError(
                f"Token artifact not found at {self.artifact_path}; "
                "compile onchain/contracts/LendingToken.sol first"
            )
        bytecode = artifact.get("bytecode") if isinstance(artifact, dict) else None
        if not bytecode or bytecode == "0x":
            raise LedgerError(f"Token artifact {self.artifact_path} has no bytecode")
        return bytecode

    # ============================================================
    # TRANSACTIONS
    # ============================================================

    def send_transaction(
        self,
        account: LocalAccount,
        function=None,
        to: Optional[str] = None,
        value: int = 0,
        gas_multiplier: float = 1.2,
        max_retries: int = 3,
    ) -> str:
        """
        Build, sign, and send a transaction with nonce retry logic.
        Does not wait for the receipt; see confirm_transaction.

        Args:
            account: Signing account (also pays the fee)
            function: Contract function or constructor to call; None for a
                plain native transfer to `to`
            to: Recipient of a native transfer
            value: Native value to send (in wei)
            gas_multiplier: Multiplier for gas estimation (1.2 = 20% buffer)
            max_retries: Maximum attempts on nonce conflicts

        Returns:
            Transaction hash (hex)
        """
        from_address = self.checksum_address(account.address)
        last_error = None

        for attempt in range(max_retries):
            try:
                # Get nonce (fresh for each attempt)
                nonce = self.web3.eth.get_transaction_count(from_address, "pending")
                gas_price = self.web3.eth.gas_price
                chain_id = self.web3.eth.chain_id

                if function is None:
                    transaction = {
                        "from": from_address,
                        "to": self.checksum_address(to),
                        "value": value,
                        "nonce": nonce,
                        "gas": NATIVE_TRANSFER_GAS,
                        "gasPrice": gas_price,
                        "chainId": chain_id,
                    }
                else:
                    try:
                        estimated_gas = function.estimate_gas(
                            {"from": from_address, "value": value}
                        )
                        gas_limit = int(estimated_gas * gas_multiplier)
                    except ContractLogicError:
                        raise
                    except Exception as e:
                        logger.warning(f"Gas estimation failed: {e}. Using default 500000")
                        gas_limit = 500000

                    transaction = function.build_transaction(
                        {
                            "from": from_address,
                            "nonce": nonce,
                            "gas": gas_limit,
                            "gasPrice": gas_price,
                            "value": value,
                            "chainId": chain_id,
                        }
                    )

                signed_txn = account.sign_transaction(transaction)
                tx_hash = self.web3.eth.send_raw_transaction(signed_txn.raw_transaction)
                tx_hex = Web3.to_hex(tx_hash)
                logger.info(f"Transaction sent: {tx_hex}")
                return tx_hex

            except ContractLogicError as e:
                logger.error(f"Contract logic error: {e}")
                raise TransactionFailedError(f"Transaction rejected: {e}") from e
            except Exception as e:
                error_message = str(e).lower()
                if (
                    "nonce" in error_message
                    or "replacement transaction underpriced" in error_message
                ) and attempt < max_retries - 1:
                    logger.warning(
                        f"Transaction conflict, retrying... (attempt {attempt + 2}/{max_retries})"
                    )
                    time.sleep(1)
                    last_error = e
                    continue
                logger.error(f"Transaction error: {e}")
                raise LedgerError(f"Transaction could not be sent: {e}") from e

        raise LedgerError(f"Transaction failed after maximum retries: {last_error}")

    def get_latest_block(self) -> LatestBlock:
        try:
            block = self.web3.eth.get_block("latest")
        except Exception as e:
            logger.error(f"Error fetching latest block: {e}")
            raise LedgerError("Unable to fetch the latest block") from e
        number = block["number"]
        return LatestBlock(
            block_hash=Web3.to_hex(block["hash"]),
            block_number=number,
            last_valid_block_number=number + settings.TX_VALID_BLOCKS,
        )

    def confirm_transaction(
        self,
        tx_hash: str,
        latest_block: Optional[LatestBlock] = None,
        timeout: Optional[int] = None,
    ):
        """
        Wait for a transaction receipt.

        Gives up once the chain moves past latest_block.last_valid_block_number
        (when given) or after `timeout` seconds, whichever comes first.
        Provider failures while polling surface as LedgerError.
        """
        timeout = timeout or settings.TX_CONFIRM_TIMEOUT
        deadline = time.monotonic() + timeout

        while True:
            try:
                receipt = self.web3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                receipt = None
            except Exception as e:
                logger.error(f"Error polling receipt for {tx_hash}: {e}")
                raise LedgerError(f"Unable to confirm transaction {tx_hash}") from e

            if receipt is not None:
                if receipt["status"] == 0:
                    raise TransactionFailedError(f"Transaction {tx_hash} failed on-chain")
                logger.info(
                    f"Transaction {tx_hash} confirmed in block {receipt['blockNumber']}"
                )
                return receipt

            if latest_block is not None:
                try:
                    current_block = self.web3.eth.block_number
                except Exception as e:
                    logger.error(f"Error fetching block number: {e}")
                    raise LedgerError(f"Unable to confirm transaction {tx_hash}") from e
                if current_block > latest_block.last_valid_block_number:
                    raise TransactionExpiredError(
                        f"Transaction {tx_hash} expired after block "
                        f"{latest_block.last_valid_block_number}"
                    )
            if time.monotonic() >= deadline:
                raise TransactionExpiredError(
                    f"Transaction {tx_hash} not confirmed within {timeout}s"
                )
            time.sleep(settings.TX_POLL_INTERVAL)

    # ============================================================
    # NATIVE CURRENCY
    # ============================================================

    def get_balance(self, address: str) -> int:
        """Native balance in wei"""
        return self.web3.eth.get_balance(self.checksum_address(address))

    def request_airdrop(self, address: str, amount: int) -> str:
        """
        Send `amount` wei from the faucet account to `address`.
        Only meaningful on dev/test networks.
        """
        if not self.faucet_private_key:
            raise LedgerError("Faucet is not configured; set FAUCET_PRIVATE_KEY")

        faucet = Account.from_key(self.faucet_private_key)
        logger.info(f"Requesting {amount} wei from faucet {faucet.address} for {address}")
        return self.send_transaction(faucet, to=address, value=amount)

    # ============================================================
    # TOKENS
    # ============================================================

    def create_mint(
        self,
        payer: LocalAccount,
        mint_authority: str,
        decimals: int,
        name: str,
        symbol: str,
    ) -> str:
        """
        Deploy a new token contract owned (and mintable) by mint_authority.

        Returns:
            Address of the newly created token
        """
        factory = self.web3.eth.contract(
            abi=self.token_abi, bytecode=self.load_token_bytecode()
        )
        constructor = factory.constructor(
            name, symbol, decimals, self.checksum_address(mint_authority)
        )

        logger.info(f"Deploying token {name} ({symbol}) with {decimals} decimals")
        tx_hash = self.send_transaction(payer, constructor)
        receipt = self.confirm_transaction(tx_hash)

        address = receipt["contractAddress"]
        if not address:
            raise TransactionFailedError(f"Token deployment {tx_hash} returned no address")

        logger.info(f"Deployed token at {address} (tx: {tx_hash})")
        return self.checksum_address(address)

    def get_mint(self, address: str) -> MintInfo:
        contract = self.token_contract(address)
        try:
            return MintInfo(
                address=self.checksum_address(address),
                decimals=contract.functions.decimals().call(),
                supply=contract.functions.totalSupply().call(),
                mint_authority=contract.functions.owner().call(),
            )
        except Exception as e:
            logger.error(f"Error reading token {address}: {e}")
            raise LedgerError(f"Unable to read token {address}") from e

    def get_token_balance(self, mint: str, owner: str) -> int:
        contract = self.token_contract(mint)
        return contract.functions.balanceOf(self.checksum_address(owner)).call()

    def get_or_create_holding_account(
        self, payer: LocalAccount, mint: str, owner: str
    ) -> HoldingAccount:
        # ERC-20 balances are keyed by owner on the token contract, so the
        # holding account always exists and payer is never charged.
        owner = self.checksum_address(owner)
        return HoldingAccount(address=owner, mint=self.checksum_address(mint), owner=owner)

    def mint_to(
        self, payer: LocalAccount, mint: str, destination: str, amount: int
    ) -> str:
        """
        Mint `amount` base units into destination (payer must be the mint
        authority). Waits for confirmation.
        """
        contract = self.token_contract(mint)
        destination = self.checksum_address(destination)

        logger.info(f"Minting {amount} units of {mint} to {destination}")
        function = contract.functions.mint(destination, amount)
        tx_hash = self.send_transaction(payer, function)
        self.confirm_transaction(tx_hash)

        logger.info(f"Minted {amount} units of {mint} (tx: {tx_hash})")
        return tx_hash

    def transfer(
        self,
        payer: LocalAccount,
        mint: str,
        source: str,
        destination: str,
        owner: LocalAccount,
        amount: int,
    ) -> str:
        """
        Submit a token transfer signed by owner. Does not wait for
        confirmation.

        Uses transferFrom when the source holding account is not owned by the
        signer (requires a prior approval).
        """
        contract = self.token_contract(mint)
        destination = self.checksum_address(destination)

        logger.info(f"Transferring {amount} units of {mint} from {source} to {destination}")

        if same_address(source, owner.address):
            function = contract.functions.transfer(destination, amount)
        else:
            function = contract.functions.transferFrom(
                self.checksum_address(source), destination, amount
            )

        return self.send_transaction(owner, function)
