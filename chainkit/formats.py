#!/usr/bin/env python3
"""
Chain Codecs
============
File formats for persisting trained chains.

Every codec stores the dictionary produced by ``Chain.to_dict()`` and
rebuilds it with ``Chain.from_dict()``. Items must be scalars (str, int,
float, bool or None) to survive any of the formats.

Supported formats (chosen by file extension):
    .cbor        - CBOR (binary)
    .json        - JSON
    .yaml, .yml  - YAML

Usage:
    from chainkit.formats import save_chain, load_chain

    save_chain(chain, "words.json")
    chain = load_chain("words.json", chain_class=TextChain)
"""

import json
import logging
from pathlib import Path
from typing import Dict, Type, Union

import cbor2
import yaml

from .chain import Chain
from .errors import FormatError

logger = logging.getLogger(__name__)


Payload = Union[str, bytes]


class Codec:
    """Base class: encode chain dicts to text (or bytes) and back."""

    name = ''
    description = ''
    extensions = ()
    binary = False

    def encode(self, data: dict) -> Payload:
        raise NotImplementedError

    def decode(self, payload: Payload):
        raise NotImplementedError

    def dumps(self, chain: Chain) -> Payload:
        """Serialize a chain to text, or bytes for binary codecs."""
        return self.encode(chain.to_dict())

    def write(self, chain: Chain, path) -> None:
        payload = self.dumps(chain)
        if self.binary:
            Path(path).write_bytes(payload)
        else:
            Path(path).write_text(payload, encoding='utf-8')

    def read(self, path, chain_class: Type[Chain] = Chain) -> Chain:
        if self.binary:
            payload = Path(path).read_bytes()
        else:
            try:
                payload = Path(path).read_text(encoding='utf-8')
            except UnicodeDecodeError as e:
                raise FormatError(f"{self.name}: {path} is not valid UTF-8: {e}") from e
        return self.loads(payload, chain_class=chain_class)

    def loads(self, text: Payload, chain_class: Type[Chain] = Chain) -> Chain:
        """
        Deserialize a chain from text (or bytes for binary codecs).

        Raises:
            FormatError: If the text is not valid or not a chain
        """
        data = self.decode(text)
        if not isinstance(data, dict):
            raise FormatError(f"{self.name}: expected a mapping at top level, got {type(data).__name__}")
        missing = [field for field in ('order', 'starts', 'transitions') if field not in data]
        if missing:
            raise FormatError(f"{self.name}: missing fields: {', '.join(missing)}")
        try:
            return chain_class.from_dict(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise FormatError(f"{self.name}: malformed chain data: {e}") from e


class JsonCodec(Codec):
    name = 'json'
    description = 'JSON, JavaScript Object Notation'
    extensions = ('json',)

    def encode(self, data: dict) -> str:
        return json.dumps(data, indent=2)

    def decode(self, text: str):
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise FormatError(f"json: {e}") from e


class YamlCodec(Codec):
    name = 'yaml'
    description = 'YAML, YAML Ain\'t Markup Language'
    extensions = ('yaml', 'yml')

    def encode(self, data: dict) -> str:
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)

    def decode(self, text: str):
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise FormatError(f"yaml: {e}") from e


class CborCodec(Codec):
    name = 'cbor'
    description = 'CBOR, Concise Binary Object Representation'
    extensions = ('cbor',)
    binary = True

    def encode(self, data: dict) -> bytes:
        return cbor2.dumps(data)

    def decode(self, payload: bytes):
        if not isinstance(payload, (bytes, bytearray)):
            raise FormatError(f"cbor: expected bytes, got {type(payload).__name__}")
        try:
            return cbor2.loads(payload)
        except cbor2.CBORDecodeError as e:
            raise FormatError(f"cbor: {e}") from e


CODECS = [JsonCodec(), YamlCodec(), CborCodec()]

FILE_EXTENSIONS: Dict[str, Codec] = {
    ext: codec for codec in CODECS for ext in codec.extensions
}


def codec_for_path(path) -> Codec:
    """
    Pick a codec from a file extension.

    Raises:
        FormatError: If the extension is unknown
    """
    ext = Path(path).suffix.lstrip('.').lower()
    codec = FILE_EXTENSIONS.get(ext)
    if codec is None:
        known = ' '.join(sorted(FILE_EXTENSIONS))
        raise FormatError(f"no known format for file `{path}`. Known extensions: {known}")
    return codec


def save_chain(chain: Chain, path) -> None:
    """Write a chain to a file in the format given by its extension."""
    codec = codec_for_path(path)
    codec.write(chain, path)
    logger.debug(f"Wrote {chain!r} to {path} ({codec.name})")


def load_chain(path, chain_class: Type[Chain] = Chain) -> Chain:
    """Read a chain from a file in the format given by its extension."""
    codec = codec_for_path(path)
    chain = codec.read(path, chain_class=chain_class)
    logger.debug(f"Loaded {chain!r} from {path} ({codec.name})")
    return chain


__all__ = [
    "Codec",
    "JsonCodec",
    "YamlCodec",
    "CborCodec",
    "CODECS",
    "FILE_EXTENSIONS",
    "codec_for_path",
    "save_chain",
    "load_chain",
]
