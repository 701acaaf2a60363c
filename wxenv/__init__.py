"""wxenv — environment resolver for watsonx.ai notebook workspaces."""

__version__ = "0.1.0"
