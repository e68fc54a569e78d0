import yaml
import os
import logging

from sectiontable import MAX_NUMBER_OF_SECTIONS

CONFIG_FILE = os.path.join(os.path.dirname(__file__), "config.yaml")

DEFAULTS = {
    "max_sections": MAX_NUMBER_OF_SECTIONS,
    "spec_file": None,
    "flags_file": None,
    "log_level": "INFO",
}


class Config(object):
    def __init__(self):
        self.data = dict(DEFAULTS)
        self.path = CONFIG_FILE

    def getConfigPath(self):
        return self.path

    def getConfig(self):
        return self.data

    def load(self, path: str = CONFIG_FILE):
        self.path = path
        self.data = dict(DEFAULTS)
        if not os.path.isfile(path):
            logging.warning("Config file {} not found, using defaults".format(path))
        else:
            with open(path) as yamlfile:
                try:
                    loaded = yaml.safe_load(yamlfile) or {}
                except yaml.YAMLError as e:
                    logging.error('Decoding {} as failed with: {}'.format(path, e))
                    raise SystemExit(1)
            if not isinstance(loaded, dict):
                logging.error("Config {} is not a mapping".format(path))
                raise SystemExit(1)
            self.data.update(loaded)

        if 'PESECT_MAX_SECTIONS' in os.environ:
            try:
                maxSections = int(os.environ["PESECT_MAX_SECTIONS"])
            except ValueError:
                logging.error("PESECT_MAX_SECTIONS is not a number: {}".format(os.environ["PESECT_MAX_SECTIONS"]))
                raise SystemExit(1)
            self.data['max_sections'] = maxSections
            logging.info("Using ENV: PESECT_MAX_SECTIONS={}, overwriting config.yaml".format(maxSections))

    def get(self, value, default=None):
        return self.data.get(value, default)


config = Config()
