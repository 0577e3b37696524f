from nsscan.config import ReaderOptions, load_config


def test_defaults():
	config = load_config({})
	assert config.reader == ReaderOptions()
	assert config.reader.allows_conditionals
	assert config.reader.features == ("clj",)
	assert config.ignore_unreadable
	assert config.log_level == "WARNING"


def test_environment_overrides():
	config = load_config(
		{
			"NSSCAN_READ_COND": "off",
			"NSSCAN_READ_FEATURES": ":cljs, bb",
			"NSSCAN_IGNORE_UNREADABLE": "false",
			"NSSCAN_LOG_LEVEL": "debug",
		}
	)
	assert not config.reader.allows_conditionals
	assert config.reader.features == ("cljs", "bb")
	assert not config.ignore_unreadable
	assert config.log_level == "DEBUG"
