"""Entry point that wires Hydra configuration and serves the World Graph API."""

import logging

import hydra
from hydra.utils import to_absolute_path
from omegaconf import DictConfig, OmegaConf

from worldgraph.config import Settings
from worldgraph.consensus import build_strategy
from worldgraph.database import TripleStore
from worldgraph.llm_utils import build_oracle
from worldgraph.orchestrator import WorldGraph
from worldgraph.webui import start_server

logger = logging.getLogger(__name__)


def build_graph(settings: Settings) -> WorldGraph:
    """Assemble the pipeline from resolved settings."""
    store = TripleStore(settings.db_path)
    logger.info("Sqlite: %s (%d facts)", store.db_path, store.count())

    oracle = build_oracle(settings)

    strategy = build_strategy(settings.strategy, settings.samples)
    logger.info("Strategy: %r", strategy)

    return WorldGraph(store, oracle, strategy)


@hydra.main(config_path="configs", config_name="config", version_base=None)
def main(cfg: DictConfig) -> None:
    """Hydra-driven execution entry point for World Graph."""
    print("\n" + "=" * 70)
    print("WORLD GRAPH")
    print("=" * 70)
    print(OmegaConf.to_yaml(cfg))

    settings = Settings.from_omegaconf(cfg)
    # Relative paths are taken from the launch directory, not Hydra's run dir.
    settings = Settings.from_mapping(
        {
            **settings.as_dict(),
            "db_path": to_absolute_path(settings.db_path),
            "public_dir": to_absolute_path(settings.public_dir) if settings.public_dir else "",
        }
    )
    logging.getLogger().setLevel(settings.log_level)

    graph = build_graph(settings)
    try:
        start_server(graph, settings.port, settings.public_dir or None)
    except KeyboardInterrupt:
        print("\nShutting down.")
    finally:
        graph.oracle.close()
        graph.store.close()


if __name__ == "__main__":
    main()
