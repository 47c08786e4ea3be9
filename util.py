import json
from pathlib import Path


def prefix(path):
    prefix_ = Path(path).resolve().parent

    def _relative(subpath):
        return str(prefix_ / subpath)

    return _relative


def slurp_json(path):
    with open(path) as f:
        return json.load(f)


def dump_json(data, path):
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
        f.write("\n")

