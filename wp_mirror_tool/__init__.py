"""Mirror of WordPress release artifacts backed by DynamoDB."""

__version__ = "0.1.0"
