"""
Protocol constants shared by Etre clients and servers.

Header names and meta-label wire names are fixed identifiers and must
not be renamed.
"""

from __future__ import annotations

from datetime import timedelta

# Client/server compatibility version, sent in VERSION_HEADER.
VERSION = "0.12.0"

API_ROOT = "/api/v1"

META_LABEL_ID = "_id"
META_LABEL_TYPE = "_type"
META_LABEL_REV = "_rev"
META_LABEL_TS = "_ts"
META_LABEL_SET_ID = "_setId"
META_LABEL_SET_OP = "_setOp"
META_LABEL_SET_SIZE = "_setSize"

CDC_WRITE_TIMEOUT = timedelta(seconds=5)

VERSION_HEADER = "X-Etre-Version"
TRACE_HEADER = "X-Etre-Trace"
QUERY_TIMEOUT_HEADER = "X-Etre-Query-Timeout"
