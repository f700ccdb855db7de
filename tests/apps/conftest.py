from pathlib import Path

import pytest

from cc_switch.apps.app_id import AppKind
from cc_switch.apps.common.framework import create_registered_projector
from cc_switch.paths import ConfigPaths


@pytest.fixture
def projector_for(tmp_path: Path):
    paths = ConfigPaths(environ={"CCSWITCH_HOME": str(tmp_path)})

    def _make(app: AppKind):
        return create_registered_projector(app, paths.resolve(app))

    return _make
