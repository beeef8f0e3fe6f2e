#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

# Operation
OPERATION_CAT = "cat"

# URL
SCHEME_SEPARATOR = "://"
PATH_SEPARATOR = "/"
WILDCARD_ANY = "*"
WILDCARD_ONE = "?"
WILDCARD_CHARS = (WILDCARD_ANY, WILDCARD_ONE)

# SI and IEC Units
KIB = 2**10
MIB = 2**20
GIB = 2**30

# Defaults
DEFAULT_PART_SIZE = 50 * MIB
DEFAULT_CONCURRENCY = 5
DEFAULT_RETRY_COUNT = 10
DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_READ_TIMEOUT = 60.0
DEFAULT_MAX_POOL_SIZE = 10
DEFAULT_CHUNK_SIZE = 64 * KIB
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s: %(message)s"

# Backends
BACKEND_S3 = "s3"
BACKEND_AIS = "ais"

# Standard Header Keys
HEADER_ACCEPT = "Accept"
HEADER_USER_AGENT = "User-Agent"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_CONTENT_LENGTH = "Content-Length"
HEADER_AUTHORIZATION = "Authorization"
# Ref: https://www.rfc-editor.org/rfc/rfc7233#section-2.1
HEADER_RANGE = "Range"
# Standard Header Values
USER_AGENT_BASE = "objcat/python"
JSON_CONTENT_TYPE = "application/json"
MSGPACK_CONTENT_TYPE = "application/msgpack"
# AIS Headers
AIS_VERSION = "ais-version"
AIS_OBJ_NAME = "ais-name"

# URL Params
QPARAM_PROVIDER = "provider"

# URL paths
URL_PATH_BUCKETS = "buckets"
URL_PATH_OBJECTS = "objects"

# HTTP Methods
HTTP_METHOD_GET = "get"
HTTP_METHOD_HEAD = "head"

# Actions
ACT_LIST = "list"

# Status Codes
STATUS_NOT_FOUND = 404
STATUS_CONFLICT = 409
STATUS_TOO_MANY_REQUESTS = 429
STATUS_RETRYABLE = (429, 500, 502, 503, 504)

# Protocol
HTTP = "http://"
HTTPS = "https://"

# ENCODING
UTF_ENCODING = "utf-8"

# Environment Variables
ENV_BACKEND = "OBJCAT_BACKEND"
ENV_PART_SIZE = "OBJCAT_PART_SIZE"
ENV_CONCURRENCY = "OBJCAT_CONCURRENCY"
ENV_RETRY_COUNT = "OBJCAT_RETRY_COUNT"
ENV_REQUEST_TIMEOUT = "OBJCAT_REQUEST_TIMEOUT"
ENV_LOG_LEVEL = "OBJCAT_LOG_LEVEL"
AIS_ENDPOINT = "AIS_ENDPOINT"
AIS_AUTHN_TOKEN = "AIS_AUTHN_TOKEN"
AIS_CLIENT_CA = "AIS_CLIENT_CA"
AIS_CLIENT_CRT = "AIS_CRT"
AIS_CLIENT_KEY = "AIS_CRT_KEY"
S3_ENDPOINT_URL = "S3_ENDPOINT_URL"
AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
AWS_PROFILE = "AWS_PROFILE"
AWS_REGION = "AWS_REGION"

# AWS Constants
AWS_DEFAULT_REGION = "us-east-1"

# Messages
MSG_SOURCE_NOT_REMOTE = "source must be a remote object"
MSG_NO_OBJECT_FOUND = "no object found"
MSG_WILDCARD_BUCKET = "bucket name cannot contain wildcards"
MSG_VERSION_SCOPE = "wildcard/prefix operations are disabled with --version-id flag"
