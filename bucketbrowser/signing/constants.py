# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Wire constants for AWS Signature Version 4."""

import hashlib
import re


ALGORITHM_IDENTIFIER = "AWS4-HMAC-SHA256"
EVENT_ALGORITHM_IDENTIFIER = "AWS4-HMAC-SHA256-PAYLOAD"
KEY_TYPE_IDENTIFIER = "aws4_request"

# Query parameters used by presigned URLs
ALGORITHM_QUERY_PARAM = "X-Amz-Algorithm"
CREDENTIAL_QUERY_PARAM = "X-Amz-Credential"
AMZ_DATE_QUERY_PARAM = "X-Amz-Date"
SIGNED_HEADERS_QUERY_PARAM = "X-Amz-SignedHeaders"
EXPIRES_QUERY_PARAM = "X-Amz-Expires"
SIGNATURE_QUERY_PARAM = "X-Amz-Signature"
TOKEN_QUERY_PARAM = "X-Amz-Security-Token"

# Header names (lowercase)
AUTH_HEADER = "authorization"
AMZ_DATE_HEADER = AMZ_DATE_QUERY_PARAM.lower()
DATE_HEADER = "date"
GENERATED_HEADERS = (AUTH_HEADER, AMZ_DATE_HEADER, DATE_HEADER)
SIGNATURE_HEADER = SIGNATURE_QUERY_PARAM.lower()
SHA256_HEADER = "x-amz-content-sha256"
TOKEN_HEADER = TOKEN_QUERY_PARAM.lower()
HOST_HEADER = "host"

# Prefix of headers hoisted into the query string when presigning
HOISTABLE_PREFIX = "x-amz-"

ALWAYS_UNSIGNABLE_HEADERS = frozenset(
    {
        AUTH_HEADER,
        "cache-control",
        "connection",
        "expect",
        "from",
        "keep-alive",
        "max-forwards",
        "pragma",
        "referer",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
        "user-agent",
        "x-amzn-trace-id",
    }
)

PROXY_HEADER_PATTERN = re.compile(r"^proxy-")
SEC_HEADER_PATTERN = re.compile(r"^sec-")

UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"
EMPTY_SHA256 = hashlib.sha256(b"").hexdigest()

#: Number of derived signing keys kept per signer.
MAX_CACHE_SIZE = 50

#: Longest lifetime of a presigned URL (one week), in seconds.
MAX_PRESIGNED_TTL = 60 * 60 * 24 * 7

SIGV4_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%SZ"
