"""Global constants for the bootstrap framework.

This module defines constants used throughout the application to avoid
hardcoded strings and make the codebase more maintainable.
"""

# Property keys recognized in application.properties
DATABASE_URL = "database.url"
DATABASE_INIT_SCHEMA = "database.init.schema"

# Bundled resources
RESOURCES_PACKAGE = "app_bootstrap.resources"
PROPERTIES_RESOURCE = "application.properties"
SCHEMA_RESOURCE = "schema.sql"

# Environment variable naming an alternative properties file
PROPERTIES_FILE_ENV = "APP_PROPERTIES_FILE"

# Schema script comment markers
SQL_COMMENT_PREFIXES = ("--", "//", "/*")
SQL_STATEMENT_TERMINATOR = ";"
