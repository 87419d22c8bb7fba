from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class IngestionConfig:
    """
    Configuration for normalizing a raw menu export into the canonical CSV.
    """

    raw_export_path: Path = Path("bitesbuzz/data/raw/food_items.json")
    processed_data_dir: Path = Path("bitesbuzz/data")
    processed_filename: str = "menu.csv"

    @property
    def processed_path(self) -> Path:
        return self.processed_data_dir / self.processed_filename


DEFAULT_INGESTION_CONFIG = IngestionConfig()
