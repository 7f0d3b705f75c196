"""Constants of the PRS Online server."""

PROJECT_NAME = "PRS Online"
API_V1_STR = "/api/v1"
GRAPHQL_PATH = "/graphql"
VERSION = "1.0.0"
SCHEMA_VERSION = "v1"
