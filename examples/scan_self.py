import logging

import pkgscan


def module_name(res):
    # pkgscan/roots.py -> pkgscan.roots
    if res.name.endswith(".py"):
        return res.name[:-3].replace("/", ".")
    return None


def main():
    logging.basicConfig(level=logging.DEBUG)

    # Every module of the installed package, from a directory or a zip
    modules = sorted(pkgscan.scan("pkgscan", module_name))

    print("Modules found:")
    for name in modules:
        print(" ", name)
    return


if __name__ == "__main__":
    main()
