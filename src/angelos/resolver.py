"""
Resolver - Turn a contract address into the string message it stores.

Steps, each gated on the previous one:

    VALIDATING -> CHECKING_EXISTENCE -> FETCHING_ABI -> SELECTING -> INVOKING -> DONE

Any failure stops the pipeline in FAILED and raises the matching
``ResolverError`` subclass. Nothing is retried and nothing is cached: every
call opens a fresh HTTP client and reads live chain state.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Optional

import httpx
from eth_abi.exceptions import DecodingError

from .config import Settings
from .pneuma.abi import parse_interface, select_message_function
from .pneuma.explorer import ExplorerClient, ExplorerError
from .pneuma.rpc import RpcClient, RpcError
from .sigil.address import is_address, is_empty_code, to_checksum_address

logger = logging.getLogger(__name__)


class Stage(enum.Enum):
    VALIDATING = "validating"
    CHECKING_EXISTENCE = "checking_existence"
    FETCHING_ABI = "fetching_abi"
    SELECTING = "selecting"
    INVOKING = "invoking"
    REVEALING = "revealing"
    DONE = "done"
    FAILED = "failed"


class ResolverError(RuntimeError):
    exit_code: int = 1

    def __init__(self, message: str, stage: Optional[Stage] = None):
        super().__init__(message)
        self.stage = stage


class InvalidAddress(ResolverError):
    exit_code = 2


class NotAContract(ResolverError):
    exit_code = 3


class UnverifiedContract(ResolverError):
    exit_code = 4


class NoMessageFunction(ResolverError):
    exit_code = 5


class InvocationFailed(ResolverError):
    exit_code = 6


class TransportError(ResolverError):
    exit_code = 7


@dataclass(frozen=True)
class ResolvedMessage:
    address: str
    function_name: str
    text: str
    chain_id: int

    def __str__(self) -> str:
        return self.text


StageObserver = Callable[[Stage], None]


class Resolver:
    """
    Resolves the message of a verified contract.

    Args:
        settings: Endpoints, keys and timeouts
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``)
        on_stage: Optional callback invoked on every stage transition
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.BaseTransport] = None,
        on_stage: Optional[StageObserver] = None,
    ):
        self.settings = settings
        self._transport = transport
        self._on_stage = on_stage
        self.stage = Stage.VALIDATING

    def _enter(self, stage: Stage) -> None:
        logger.debug("resolver stage %s -> %s", self.stage.value, stage.value)
        self.stage = stage
        if self._on_stage is not None:
            self._on_stage(stage)

    def _fail(self, error_cls: type[ResolverError], message: str) -> ResolverError:
        failed_at = self.stage
        self._enter(Stage.FAILED)
        logger.info("resolution failed at %s: %s", failed_at.value, message)
        return error_cls(message, stage=failed_at)

    def resolve(self, address: str) -> ResolvedMessage:
        """
        Read the message stored at *address*.

        Raises:
            InvalidAddress: Empty or malformed address (no network call made)
            NotAContract: No bytecode at the address
            UnverifiedContract: Explorer has no verified ABI for it
            NoMessageFunction: No zero-argument view/pure string getter
            InvocationFailed: The getter reverted, failed or returned garbage
            TransportError: Any other network failure
        """
        self._enter(Stage.VALIDATING)

        if not address or not address.strip():
            raise self._fail(InvalidAddress, "Please enter a contract address")
        if not is_address(address):
            raise self._fail(
                InvalidAddress,
                "Invalid contract address format, please check and try again",
            )
        checksummed = to_checksum_address(address)

        with httpx.Client(timeout=self.settings.http_timeout, transport=self._transport) as client:
            rpc = RpcClient(self.settings.rpc_url, client)
            explorer = ExplorerClient(
                client,
                api_url=self.settings.explorer_api_url,
                chain_id=self.settings.chain_id,
                api_key=self.settings.explorer_api_key,
            )

            self._enter(Stage.CHECKING_EXISTENCE)
            try:
                code = rpc.get_code(checksummed)
            except (httpx.HTTPError, RpcError, ValueError) as exc:
                raise self._fail(TransportError, f"Failed to read contract code: {exc}") from exc
            if is_empty_code(code):
                raise self._fail(
                    NotAContract, "This address is not a contract or does not exist"
                )

            self._enter(Stage.FETCHING_ABI)
            try:
                abi = explorer.get_abi(checksummed)
            except ExplorerError as exc:
                raise self._fail(
                    UnverifiedContract,
                    f"Contract not verified on the explorer ({exc}).\n\n"
                    "Please verify your contract first.",
                ) from exc
            except httpx.HTTPError as exc:
                raise self._fail(TransportError, f"Explorer request failed: {exc}") from exc

            self._enter(Stage.SELECTING)
            function = select_message_function(parse_interface(abi))
            if function is None:
                raise self._fail(NoMessageFunction, "No message found in this contract.")
            logger.debug("selected %s on %s", function.signature, checksummed)

            self._enter(Stage.INVOKING)
            try:
                text = rpc.read_contract(checksummed, function.name, function.output_types)
            except (httpx.HTTPError, RpcError, DecodingError, ValueError) as exc:
                raise self._fail(
                    InvocationFailed, f"Calling {function.signature} failed: {exc}"
                ) from exc
            if not isinstance(text, str):
                raise self._fail(
                    InvocationFailed, f"Calling {function.signature} returned no data"
                )

        self._enter(Stage.DONE)
        return ResolvedMessage(
            address=checksummed,
            function_name=function.name,
            text=text,
            chain_id=self.settings.chain_id,
        )


def resolve(address: str, settings: Optional[Settings] = None) -> ResolvedMessage:
    """Resolve *address* with settings from the environment by default."""
    return Resolver(settings or Settings.from_env()).resolve(address)
