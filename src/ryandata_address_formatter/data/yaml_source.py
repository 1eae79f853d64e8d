from __future__ import annotations

import logging
import os
import re
from importlib import resources
from pathlib import Path
from typing import Any, Union

import yaml

from ryandata_address_formatter.data.base import BaseConfigurationSource
from ryandata_address_formatter.models.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONF_DIR_ENV_VAR = "RYANDATA_ADDRESS_CONF_DIR"
BUNDLED_CONF_PACKAGE = "ryandata_address_formatter.data.conf"

COMPONENTS_FILE = "components.yaml"
WORLDWIDE_FILE = "worldwide.yaml"
STATE_CODES_FILE = "state_codes.yaml"
COUNTY_CODES_FILE = "county_codes.yaml"

# Where each file may sit below a corpus directory: a flat directory, the
# upstream ``conf/`` directory, or the root of an address-formatting checkout.
CORPUS_FILE_LOCATIONS: dict[str, tuple[str, ...]] = {
    WORLDWIDE_FILE: (
        WORLDWIDE_FILE,
        f"countries/{WORLDWIDE_FILE}",
        f"conf/countries/{WORLDWIDE_FILE}",
    ),
    COMPONENTS_FILE: (COMPONENTS_FILE, f"conf/{COMPONENTS_FILE}"),
    STATE_CODES_FILE: (STATE_CODES_FILE, f"conf/{STATE_CODES_FILE}"),
    COUNTY_CODES_FILE: (COUNTY_CODES_FILE, f"conf/{COUNTY_CODES_FILE}"),
}

BOOL_TAG = "tag:yaml.org,2002:bool"


class CorpusLoader(yaml.SafeLoader):
    """SafeLoader that only reads ``true``/``false`` as booleans.

    Plain YAML 1.1 loading turns the country codes ``NO`` (Norway) and the
    state code ``ON`` (Ontario) into booleans. The corpus is written against
    YAML 1.2, where they are strings.
    """


CorpusLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
CorpusLoader.add_implicit_resolver(
    BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


class YAMLConfigurationSource(BaseConfigurationSource):
    """Configuration source that reads the YAML rule corpus.

    By default, reads the corpus bundled with the package. A directory can
    be given explicitly or through the ``RYANDATA_ADDRESS_CONF_DIR``
    environment variable; it must hold ``worldwide.yaml`` and may hold
    ``components.yaml``, ``state_codes.yaml`` and ``county_codes.yaml``.
    The upstream layout (``conf/countries/worldwide.yaml`` next to
    ``conf/components.yaml``) is accepted too, from either the checkout root
    or its ``conf/`` directory.
    """

    name = "yaml"

    def __init__(self, conf_dir: Union[str, Path] | None = None) -> None:
        """Initialize the YAML source.

        Args:
            conf_dir: Directory holding the corpus. If None, the environment
                variable is consulted, then the bundled corpus is used.
        """
        if conf_dir is None:
            conf_dir = os.environ.get(CONF_DIR_ENV_VAR) or None
        self._conf_dir = Path(conf_dir) if conf_dir is not None else None

    @property
    def conf_dir(self) -> Path | None:
        """Directory being read, None for the bundled corpus."""
        return self._conf_dir

    @staticmethod
    def _find_file(conf_dir: Path, filename: str) -> Path | None:
        for relative in CORPUS_FILE_LOCATIONS.get(filename, (filename,)):
            path = conf_dir / relative
            if path.is_file():
                return path
        return None

    def _read_text(self, filename: str, required: bool) -> str | None:
        if self._conf_dir is not None:
            path = self._find_file(self._conf_dir, filename)
            if path is None:
                missing = self._conf_dir / filename
                if required:
                    raise ConfigurationError(
                        f"Missing corpus file {missing}", {"source": self.name, "file": filename}
                    )
                logger.debug("optional corpus file %s not found", missing)
                return None
            return path.read_text(encoding="utf-8")

        # Bundled corpus - use importlib.resources
        data_file = resources.files(BUNDLED_CONF_PACKAGE).joinpath(filename)
        if not data_file.is_file():
            if required:
                raise ConfigurationError(
                    f"Missing bundled corpus file {filename}",
                    {"source": self.name, "file": filename},
                )
            return None
        return data_file.read_text(encoding="utf-8")

    def _load_yaml(self, filename: str, required: bool = False, multi: bool = False) -> Any:
        text = self._read_text(filename, required)
        if text is None:
            return None
        try:
            if multi:
                documents = yaml.load_all(text, Loader=CorpusLoader)
                return [doc for doc in documents if doc is not None]
            return yaml.load(text, Loader=CorpusLoader)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {filename}: {e}", {"source": self.name, "file": filename}
            ) from e

    def _load_components_impl(self) -> Any:
        return self._load_yaml(COMPONENTS_FILE, multi=True)

    def _load_worldwide_impl(self) -> Any:
        return self._load_yaml(WORLDWIDE_FILE, required=True)

    def _load_state_codes_impl(self) -> Any:
        return self._load_yaml(STATE_CODES_FILE)

    def _load_county_codes_impl(self) -> Any:
        return self._load_yaml(COUNTY_CODES_FILE)

    def __repr__(self) -> str:
        location = str(self._conf_dir) if self._conf_dir is not None else "<bundled>"
        return f"YAMLConfigurationSource(conf_dir={location!r})"
