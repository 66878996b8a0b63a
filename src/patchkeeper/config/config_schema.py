"""Schemas for the patchkeeper configuration file."""

from pydantic import BaseModel, Field


class InitConfigSchema(BaseModel):
	"""Settings for ``pk init``."""

	default_branch: str = "main"


class IdentityConfigSchema(BaseModel):
	"""Fallback signature used when git has no user identity configured."""

	name: str = "patchkeeper"
	email: str = "patchkeeper@localhost"


class RefreshConfigSchema(BaseModel):
	"""Defaults for ``pk refresh``."""

	update_author: bool = False
	update_committer: bool = False


class AppConfigSchema(BaseModel):
	"""Root configuration schema."""

	init: InitConfigSchema = Field(default_factory=InitConfigSchema)
	identity: IdentityConfigSchema = Field(default_factory=IdentityConfigSchema)
	refresh: RefreshConfigSchema = Field(default_factory=RefreshConfigSchema)
