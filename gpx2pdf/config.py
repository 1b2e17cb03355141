"""
Conversion options.

Options can come from defaults, a YAML file and command line overrides, in
that order of precedence (lowest first). Example YAML:

    gpx2pdf:
      page_number: 2
      pdf_password: secret
      use_geocache_name: true
      use_gsak_smart_name: false
      max_name_length: 12
      name_font_size: 7.5
"""

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from gpx2pdf.gpx.name_policy import NamePolicy

logger = logging.getLogger(__name__)

CONFIG_SECTION = 'gpx2pdf'


@dataclass(frozen=True)
class ConversionConfig:
    """Options for one GPX to GeoPDF conversion.

    Attributes:
        page_number: One-based page of the PDF to annotate.
        pdf_password: User password for encrypted PDFs.
        use_geocache_name: Use the Groundspeak cache name when present.
        use_gsak_smart_name: Use the GSAK smart name when present.
        max_name_length: Names are cut to this many characters; None or a
            negative value means no limit.
        name_font_size: Font size of the printed names, in PDF points.
    """
    page_number: int = 1
    pdf_password: Optional[str] = None
    use_geocache_name: bool = True
    use_gsak_smart_name: bool = True
    max_name_length: Optional[int] = 10
    name_font_size: float = 8.0

    def __post_init__(self) -> None:
        if isinstance(self.page_number, bool) or not isinstance(self.page_number, int):
            raise ValueError(f"page_number must be an integer, got {self.page_number!r}")
        if self.page_number < 1:
            raise ValueError(f"page_number must be >= 1, got {self.page_number}")
        if self.max_name_length is not None and (
            isinstance(self.max_name_length, bool) or not isinstance(self.max_name_length, int)
        ):
            raise ValueError(
                f"max_name_length must be an integer or null, got {self.max_name_length!r}"
            )
        if (
            isinstance(self.name_font_size, bool)
            or not isinstance(self.name_font_size, (int, float))
            or self.name_font_size <= 0
        ):
            raise ValueError(f"name_font_size must be positive, got {self.name_font_size!r}")

    @property
    def name_policy(self) -> NamePolicy:
        """Name selection and truncation rules for GPX waypoints."""
        max_length = self.max_name_length
        if max_length is not None and max_length < 0:
            max_length = None
        return NamePolicy(
            use_geocache_name=self.use_geocache_name,
            use_gsak_smart_name=self.use_gsak_smart_name,
            max_length=max_length,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConversionConfig':
        """Create configuration from a dictionary.

        Args:
            data: Mapping of option names to values. Unknown keys are rejected.

        Raises:
            ValueError: If a key is unknown or a value is invalid.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(
                f"Unknown configuration option(s): {', '.join(unknown)}. "
                f"Valid options: {', '.join(sorted(known))}"
            )
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> 'ConversionConfig':
        """Load configuration from the ``gpx2pdf`` section of a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is malformed or holds invalid values.
        """
        config_path = Path(path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(config_path, 'r') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML configuration file: {e}") from e

        if not isinstance(data, dict) or CONFIG_SECTION not in data:
            raise ValueError(
                f"Configuration file missing '{CONFIG_SECTION}' section: {path}"
            )

        section = data[CONFIG_SECTION] or {}
        if not isinstance(section, dict):
            raise ValueError(f"'{CONFIG_SECTION}' section must be a mapping: {path}")

        logger.debug(f"Loaded configuration from {config_path}")
        return cls.from_dict(section)

    def with_overrides(self, **overrides: Any) -> 'ConversionConfig':
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


def get_default_config() -> ConversionConfig:
    """Get the default conversion configuration."""
    return ConversionConfig()
