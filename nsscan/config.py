from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict


ENV_PREFIX = "NSSCAN_"

READ_COND_ALLOW = "allow"

_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ReaderOptions(BaseModel):
	model_config = ConfigDict(frozen=True)

	# "allow" reads reader conditionals; None makes them a read error
	read_cond: Optional[str] = READ_COND_ALLOW
	features: Tuple[str, ...] = ("clj",)

	@property
	def allows_conditionals(self) -> bool:
		return self.read_cond == READ_COND_ALLOW


class ScanConfig(BaseModel):
	model_config = ConfigDict(frozen=True)

	reader: ReaderOptions = ReaderOptions()
	ignore_unreadable: bool = True
	log_level: str = "WARNING"


def _env(environ: Mapping[str, str], name: str) -> Optional[str]:
	value = environ.get(ENV_PREFIX + name)
	if value is None:
		return None
	return value.strip()


def load_config(environ: Optional[Mapping[str, str]] = None) -> ScanConfig:
	if environ is None:
		environ = os.environ

	read_cond: Optional[str] = READ_COND_ALLOW
	raw = _env(environ, "READ_COND")
	if raw is not None:
		read_cond = READ_COND_ALLOW if raw.lower() == READ_COND_ALLOW else None

	features: Tuple[str, ...] = ("clj",)
	raw = _env(environ, "READ_FEATURES")
	if raw:
		features = tuple(f.strip().lstrip(":") for f in raw.split(",") if f.strip())

	ignore_unreadable = True
	raw = _env(environ, "IGNORE_UNREADABLE")
	if raw is not None:
		ignore_unreadable = raw.lower() not in _FALSE_VALUES

	log_level = (_env(environ, "LOG_LEVEL") or "WARNING").upper()

	return ScanConfig(
		reader=ReaderOptions(read_cond=read_cond, features=features),
		ignore_unreadable=ignore_unreadable,
		log_level=log_level,
	)


@lru_cache(maxsize=None)
def get_config() -> ScanConfig:
	"""Process-wide configuration, resolved once from the environment."""
	return load_config()


def default_reader_options() -> ReaderOptions:
	return get_config().reader


def configure_logging(level: Optional[str] = None) -> None:
	logging.basicConfig(
		level=(level or get_config().log_level).upper(),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)
