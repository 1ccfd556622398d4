"""Configuration for document generation.

The config is usually kept in YAML, either at the top level or under a
``swaggerdoc:`` key. Both snake_case and camelCase keys are accepted.
"""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiInfo(BaseModel):
    """The ``info`` object of the generated document."""

    model_config = ConfigDict(extra="allow")

    title: str = "API"
    description: str = ""
    version: str = "1.0.0"


class SwaggerDocConfig(BaseModel):
    """Settings read by the document builder."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    enable: bool = True
    base_dir: Path = Path(".")
    dir_scanner: str = "app/controller"
    contract_dir: str | None = None
    openapi: str = "3.0.3"
    api_info: ApiInfo = Field(default_factory=ApiInfo)
    servers: list[dict] = []
    enable_security: bool = False
    security_schemes: dict[str, dict] = {}
    consumes: list[str] = ["application/json"]
    produces: list[str] = ["application/json"]
    schemas: dict[str, dict] = {}
    strict_binding: bool = False
    on_duplicate_route: Literal["warn", "error"] = "warn"
    extensions: list[str] = [".py", ".js", ".ts"]
    compiled_pairs: dict[str, str] = {".ts": ".js"}

    @property
    def scan_root(self) -> Path:
        return self.base_dir / self.dir_scanner

    @property
    def contract_root(self) -> Path | None:
        if not self.contract_dir:
            return None
        return self.base_dir / self.contract_dir

    def security_names(self) -> list[str]:
        """Scheme names that operations may require, in declaration order."""
        if not self.enable_security:
            return []
        return list(self.security_schemes)


def load_config(file_path: Path) -> SwaggerDocConfig:
    """Load a config file. A relative ``base_dir`` is taken from the file's directory."""
    data = yaml.safe_load(file_path.read_text(encoding="utf-8")) or {}
    if "swaggerdoc" in data:
        data = data["swaggerdoc"] or {}

    config = SwaggerDocConfig.model_validate(data)
    if not config.base_dir.is_absolute():
        config.base_dir = file_path.parent / config.base_dir
    return config
