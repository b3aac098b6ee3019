"""
Configuration data models for cl-parse.

These models define the structure of .cl-parse.json and
~/.config/cl-parse/config.json files, with validation via Pydantic.
"""

from pydantic import BaseModel, ConfigDict, Field

from clparse.core.changelog.render import OutputFormat


class ClParseConfig(BaseModel):
    """
    Settings for a cl-parse run.

    CLI flags override every field. The token is only ever taken from
    the environment or the command line, never from config files.
    """

    model_config = ConfigDict(extra="forbid")

    changelog: str = Field(
        default="CHANGELOG.md",
        description="Changelog path used when none is given on the command line",
    )
    format: OutputFormat = Field(default=OutputFormat.JSON, description="Output format")
    include_body: bool = Field(
        default=False, description="Include commit bodies for changes with a commit link"
    )
    fetch_item_details: bool = Field(
        default=False, description="Fetch titles and bodies of referenced issues and PRs"
    )
    token: str | None = Field(
        default=None, description="Access token for the hosting provider", repr=False
    )
