"""CInP (Contractor's RPC/resource convention) over HTTP."""

from contractorcli.cinp.client import CINP_VERSION, LIST_CHUNK_SIZE, CInPClient
from contractorcli.cinp.uri import ParsedURI, build, extract_id, extract_id_list, extract_ids, split

__all__ = [
    "CINP_VERSION",
    "LIST_CHUNK_SIZE",
    "CInPClient",
    "ParsedURI",
    "build",
    "extract_id",
    "extract_id_list",
    "extract_ids",
    "split",
]
