"""ABI encoding helpers for deploy payloads and function call data."""

from typing import Any, Dict, List, Sequence

from eth_abi import encode
from eth_utils import add_0x_prefix, function_abi_to_4byte_selector, remove_0x_prefix

from .artifacts import Artifact


def _abi_type(param: Dict[str, Any]) -> str:
    abi_type = param['type']
    if abi_type.startswith('tuple'):
        inner = ",".join(_abi_type(c) for c in param.get('components', []))
        return f"({inner}){abi_type[len('tuple'):]}"
    return abi_type


def _input_types(entry: Dict[str, Any]) -> List[str]:
    return [_abi_type(p) for p in entry.get('inputs', [])]


def find_function(abi: Sequence[Dict[str, Any]], name: str, arg_count: int) -> Dict[str, Any]:
    for entry in abi:
        if entry.get('type') == 'function' and entry.get('name') == name \
                and len(entry.get('inputs', [])) == arg_count:
            return entry
    raise ValueError(f"No function {name} taking {arg_count} argument(s) in ABI")


def encode_function_call(abi: Sequence[Dict[str, Any]], name: str, args: Sequence[Any] = ()) -> str:
    """Selector plus ABI-encoded arguments, as a 0x-prefixed hex string."""
    entry = find_function(abi, name, len(args))
    selector = function_abi_to_4byte_selector(entry)
    return add_0x_prefix((selector + encode(_input_types(entry), list(args))).hex())


def encode_deploy_data(artifact: Artifact, args: Sequence[Any] = ()) -> str:
    """
    Creation bytecode followed by the ABI-encoded constructor arguments.

    Args:
        artifact: Compiled contract
        args: Constructor arguments in declaration order

    Returns:
        0x-prefixed hex payload for a contract-creation transaction
    """
    constructor = next((e for e in artifact.abi if e.get('type') == 'constructor'), None)
    types = _input_types(constructor) if constructor else []
    if len(types) != len(args):
        raise ValueError(
            f"{artifact.name} constructor takes {len(types)} argument(s), got {len(args)}"
        )
    encoded_args = encode(types, list(args)).hex() if types else ""
    return add_0x_prefix(remove_0x_prefix(artifact.bytecode) + encoded_args)
