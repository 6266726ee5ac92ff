"""Call payload encoding for the target contract.

Wraps a contract ABI and encodes function calls as
``selector || abi.encode(args)`` without touching the network.
"""
import json
from pathlib import Path
from typing import Any, Dict, List, Sequence

from eth_abi import encode
from eth_abi.exceptions import ABITypeError, EncodingError as AbiEncodingError, ParseError
from eth_utils import function_abi_to_4byte_selector
from eth_utils.abi import collapse_if_tuple

from .errors import EncodingError

__all__ = ["ContractInterface", "load_abi"]

# ABI file directory
ABI_DIR = Path(__file__).parent / "abis"

# ABI loading cache
_ABI_CACHE: dict[str, list] = {}


def load_abi(name: str) -> list:
    """Load ABI JSON with caching.

    Args:
        name: ABI filename (e.g., "zkfest_voting.json")

    Returns:
        Parsed ABI list
    """
    if name not in _ABI_CACHE:
        _ABI_CACHE[name] = json.loads((ABI_DIR / name).read_text())
    return _ABI_CACHE[name]


class ContractInterface:
    """Encodes calls against a contract ABI."""

    def __init__(self, abi: List[Dict[str, Any]]):
        self.abi = abi

    @classmethod
    def from_file(cls, name: str) -> "ContractInterface":
        return cls(load_abi(name))

    def functions(self, fn_name: str) -> List[Dict[str, Any]]:
        return [
            entry
            for entry in self.abi
            if entry.get("type", "function") == "function" and entry.get("name") == fn_name
        ]

    def encode_call(self, fn_name: str, args: Sequence[Any]) -> bytes:
        """Encode a function call payload.

        Args:
            fn_name: Function name (e.g., "vote")
            args: Positional arguments matching the function inputs

        Returns:
            4-byte selector followed by the ABI-encoded arguments

        Raises:
            EncodingError: If the function is unknown, the call is ambiguous,
                or the arguments do not match the input types
        """
        candidates = [fn for fn in self.functions(fn_name) if len(fn.get("inputs", [])) == len(args)]
        if not candidates:
            raise EncodingError(
                f"No function {fn_name!r} taking {len(args)} argument(s) in contract interface",
                details={"function": fn_name, "args": list(args)},
            )
        if len(candidates) > 1:
            raise EncodingError(
                f"Ambiguous call to overloaded function {fn_name!r}",
                details={"function": fn_name},
            )

        fn_abi = candidates[0]
        types = [collapse_if_tuple(arg) for arg in fn_abi.get("inputs", [])]
        try:
            encoded_args = encode(types, list(args))
        except (AbiEncodingError, ParseError, ABITypeError) as e:
            raise EncodingError(
                f"Cannot encode arguments for {fn_name}({','.join(types)}): {e}",
                details={"function": fn_name, "types": types},
            ) from e
        return function_abi_to_4byte_selector(fn_abi) + encoded_args
