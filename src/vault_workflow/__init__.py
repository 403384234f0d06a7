"""Google Vault workflow blocks and knowledge-base tag rendering."""

from .config import ExecutorConfig, TagCellConfig, VaultApiConfig

__all__ = ["ExecutorConfig", "TagCellConfig", "VaultApiConfig"]
