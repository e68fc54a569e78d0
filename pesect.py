#!/usr/bin/python3

import argparse
import logging
import os
import pprint
import sys
import pefile

from config import config
from filehelper import loadSectionTableFromFile
from model.errors import SectionTableError, SectionNotFound
from model.model_flags import loadFlagDictionary, SECTION_CHARACTERISTICS
from model.model_spec import loadFieldSpecification, SECTION_TABLE_SPEC
from renderer import render, renderHeader, renderSummary


def main():
    parser = argparse.ArgumentParser(description="Decode and print the section table of a PE file")
    parser.add_argument("-f", "--file", help="PE file to read")
    parser.add_argument("-n", "--number", help="Only show the section with this number (1-based)", type=int)
    parser.add_argument("-s", "--section", help="Only show the first section with this name")
    parser.add_argument("--all", help="With -s: show all sections with that name", default=False, action='store_true')
    parser.add_argument("-l", "--list", help="One line per section", default=False, action='store_true')
    parser.add_argument("--spec", help="Field specification yaml (default: bundled)")
    parser.add_argument("--flags", help="Characteristics names yaml (default: bundled)")
    parser.add_argument("--logfile", help="Log everything to <file>.log", default=False, action='store_true')
    parser.add_argument("-v", "--verbose", help="Debug logging", default=False, action='store_true')
    parser.add_argument("-C", "--Config", help="Print config location and content", default=False, action='store_true')
    args = parser.parse_args()

    config.load()
    if args.Config:
        print("Config path: " + config.getConfigPath())
        pprint.pprint(config.getConfig())
        return 0

    if not args.file or not os.path.exists(args.file):
        print("File {} does not exist. Aborting".format(args.file))
        return 1

    level = logging.DEBUG if args.verbose else config.get("log_level", "INFO")
    setupLogging(args.file if args.logfile else None, level)
    logging.info("Using file: {}".format(args.file))

    try:
        specification = loadFieldSpecification(args.spec or config.get("spec_file") or SECTION_TABLE_SPEC)
        flagDictionary = loadFlagDictionary(args.flags or config.get("flags_file") or SECTION_CHARACTERISTICS)
        table = loadSectionTableFromFile(args.file, specification, config.get("max_sections"))
        table.decode()
        print(output(table, args, flagDictionary), end='')
    except pefile.PEFormatError as e:
        logging.error("Not a PE file: {}".format(e))
        return 1
    except SectionTableError as e:
        logging.error("{}: {}".format(type(e).__name__, e))
        return 1
    return 0


def output(table, args, flagDictionary) -> str:
    if args.number is not None:
        headers = [table.getSectionHeader(args.number)]
    elif args.section is not None and args.all:
        headers = table.getSectionHeadersByName(args.section)
        if not headers:
            raise SectionNotFound("invalid section name, no section header found: {}".format(args.section))
    elif args.section is not None:
        headers = [table.getSectionHeader(args.section)]
    elif args.list:
        return renderSummary(table)
    else:
        return render(table, flagDictionary)

    s = ''
    for header in headers:
        s += "entry number {}:".format(header.number) + "\n"
        s += renderHeader(header, table.specification, flagDictionary) + "\n"
    return s


def setupLogging(filename, level=logging.INFO):
    logging.root.handlers = []

    log_format = '[%(levelname)-8s][%(asctime)s] %(funcName)s() :: %(message)s'
    handlers = [
        logging.StreamHandler(),
    ]
    if filename is not None:
        handlers.append(logging.FileHandler(filename + ".log"))
    logging.basicConfig(
        level=level,
        format=log_format,
        handlers=handlers,
    )


if __name__ == "__main__":
    sys.exit(main())
