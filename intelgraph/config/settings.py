"""intelgraph configuration via environment / .env file."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from intelgraph.config.params import AnalysisParams, QualityParams, StructuralParams


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="INTELGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # --- Community detection ---
    LOUVAIN_MAX_PASSES: int = 20

    # --- Centrality ---
    PAGERANK_DAMPING: float = 0.85
    PAGERANK_ITERATIONS: int = 20
    KEY_NODE_THRESHOLD: float = 0.5

    # --- Information pressure ---
    ALPHA: float = 0.65
    DEFECT_THRESHOLD: float = 0.35
    WARNING_THRESHOLD: float = 0.50
    PROPAGATION_MAX_ITERATIONS: int = 50

    # --- Observability ---
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def _check_thresholds(self) -> "Settings":
        if self.DEFECT_THRESHOLD > self.WARNING_THRESHOLD:
            raise ValueError(
                "DEFECT_THRESHOLD must not exceed WARNING_THRESHOLD "
                f"({self.DEFECT_THRESHOLD} > {self.WARNING_THRESHOLD})"
            )
        return self

    def analysis_params(self) -> AnalysisParams:
        """Build the immutable parameter set used by every analysis call."""
        return AnalysisParams(
            structural=StructuralParams(
                louvain_max_passes=self.LOUVAIN_MAX_PASSES,
                pagerank_damping=self.PAGERANK_DAMPING,
                pagerank_iterations=self.PAGERANK_ITERATIONS,
                key_node_threshold=self.KEY_NODE_THRESHOLD,
            ),
            quality=QualityParams(
                alpha=self.ALPHA,
                defect_threshold=self.DEFECT_THRESHOLD,
                warning_threshold=self.WARNING_THRESHOLD,
                max_iterations=self.PROPAGATION_MAX_ITERATIONS,
            ),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
