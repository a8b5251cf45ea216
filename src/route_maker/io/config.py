# src/route_maker/io/config.py
import json
import os
from pathlib import Path

from route_maker.config.models import EditorModel


def load_config(path: str | Path) -> EditorModel:
    p = Path(os.path.expandvars(os.path.expanduser(str(path))))
    return EditorModel.model_validate(json.loads(p.read_text(encoding="utf-8")))
