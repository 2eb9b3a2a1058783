import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigParseFailure, DuplicateProfileFailure, ProfileNotFound
from .keys import generate_keypair, keypair_from_private_key
from .models import NetworkEndpoints, Profile
from .normalizer import normalize_address

logger = logging.getLogger(__name__)


class ProfileStore:
    """
    Manages Aptos CLI profiles inside a harness workspace.

    Rationale:
    The CLI resolves `--profile` and profile-name addresses from
    `.aptos/config.yaml` in its working directory. Profiles are appended to
    that file directly instead of running `aptos init`, which would contact
    the network.

    Writes are deterministic (sorted keys) and a failed call never leaves a
    partially updated file behind.
    """

    def __init__(self, config_path: Path, network: NetworkEndpoints):
        self.config_path = config_path
        self.network = network

    def _load(self) -> Dict[str, Any]:
        if not self.config_path.exists():
            return {"profiles": {}}
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                document = yaml.safe_load(f.read())
        except yaml.YAMLError as exc:
            raise ConfigParseFailure(str(self.config_path), str(exc)) from exc
        if document is None:
            document = {}
        if not isinstance(document, dict):
            raise ConfigParseFailure(str(self.config_path), "top-level value is not a mapping")
        profiles = document.get("profiles")
        if profiles is None:
            document["profiles"] = {}
        elif not isinstance(profiles, dict):
            raise ConfigParseFailure(str(self.config_path), "profiles is not a mapping")
        return document

    def _save(self, document: Dict[str, Any]) -> None:
        content = yaml.safe_dump(document, indent=2, sort_keys=True, width=120)
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile("w", delete=False, dir=str(self.config_path.parent), encoding="utf-8") as tmp:
            tmp.write(content)
            tmp_path = Path(tmp.name)
        os.replace(tmp_path, self.config_path)

    def init_profile(self, name: str, private_key: Optional[str] = None) -> Profile:
        """Create profile `name`, generating a fresh Ed25519 key when none is given."""
        keypair = keypair_from_private_key(private_key) if private_key is not None else generate_keypair()
        profile = Profile(
            name=name,
            address=keypair.account_address,
            private_key=keypair.private_key_aip80,
            public_key=keypair.public_key_string,
            network=self.network.label,
            rest_url=self.network.rest_url,
        )

        document = self._load()
        profiles = document["profiles"]
        if name in profiles:
            raise DuplicateProfileFailure(name, str(self.config_path))
        profiles[name] = profile.to_config_entry()
        self._save(document)
        logger.info("Initialized profile %s address=%s", name, profile.address)
        return profile

    def names(self) -> List[str]:
        return sorted(self._load()["profiles"].keys())

    def get(self, name: str) -> Profile:
        entry = self._load()["profiles"].get(name)
        if not isinstance(entry, dict):
            raise ProfileNotFound(name)
        return Profile(
            name=name,
            address=normalize_address(str(entry.get("account", ""))),
            private_key=str(entry.get("private_key", "")),
            public_key=str(entry.get("public_key", "")),
            network=str(entry.get("network", "")),
            rest_url=str(entry.get("rest_url", "")),
        )

    def find_by_address(self, address: str) -> Optional[str]:
        target = normalize_address(address)
        for name, entry in self._load()["profiles"].items():
            if not isinstance(entry, dict):
                continue
            account = entry.get("account")
            if isinstance(account, str) and normalize_address(account) == target:
                return str(name)
        return None
