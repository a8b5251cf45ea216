# route_maker/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from route_maker.app.hooks import NoopHooks
from route_maker.app.session import EditingSession
from route_maker.config.models import EditorModel
from route_maker.io.gpx_codec import TrackCodec
from route_maker.io.session_logging import SessionLogging  # JSON logs
from route_maker.runtime.registries import make_geodesy, make_projection


@dataclass
class App:
    config: EditorModel
    session: EditingSession


def build(cfg: EditorModel | Mapping | None = None, *, use_logging: bool = True) -> App:
    # 0) Validate config
    if cfg is None:
        model = EditorModel()
    else:
        model = cfg if isinstance(cfg, EditorModel) else EditorModel.model_validate(cfg)

    # 1) Collaborators
    distance = make_geodesy(model.geodesy)
    projection = make_projection(model.projection)

    # 2) Hooks
    hooks = (
        SessionLogging(
            session_id=model.session_id,
            level=model.log.level,
            debug=model.log.debug,
        )
        if use_logging
        else NoopHooks()
    )

    # 3) Session
    session = EditingSession(
        distance=distance,
        projection=projection,
        codec=TrackCodec(distance),
        export=model.export,
        hooks=hooks,
        name=model.export.name,
    )
    return App(config=model, session=session)
