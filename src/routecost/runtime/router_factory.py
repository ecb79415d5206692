# routecost/runtime/router_factory.py
from collections.abc import Mapping

from routecost.app.protocols import GraphReader
from routecost.config.models import RouterModel
from routecost.io.search_logging import SearchLogging
from routecost.runtime.registries import costing_options, make_costing
from routecost.runtime.resources import load_graph_from_path
from routecost.search.hooks import NoopHooks
from routecost.services.router import Router


def build_router(
    cfg: RouterModel | Mapping, *, graph: GraphReader | None = None, use_logging: bool = True
) -> Router:
    # 0) Validate config; costing goes through the registry so bad modes and
    #    out-of-range options surface as ConfigurationError
    if isinstance(cfg, RouterModel):
        model = cfg
    else:
        raw = dict(cfg)
        costing = raw.pop("costing", None) or {"mode": "pedestrian"}
        if isinstance(costing, Mapping):
            costing = costing_options(str(costing.get("mode", "pedestrian")), costing)
        model = RouterModel.model_validate({**raw, "costing": costing})

    # 1) Graph: explicit wins over the configured file
    if graph is None:
        if model.graph is None:
            raise ValueError("No graph provided")
        graph = load_graph_from_path(model.graph.file, model.graph.fmt)

    # 2) Cost model
    costing = make_costing(model.costing.mode, model.costing)

    # 3) Hooks
    hooks = (
        SearchLogging(
            run_id=model.run_id,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        if use_logging
        else NoopHooks()
    )
    return Router(graph=graph, costing=costing, search=model.search, hooks=hooks)
