from dataclasses import dataclass, field
import multiprocessing as mp
import yaml
from pathlib import Path


@dataclass
class DedupConfig:
    """Configuration for duplicate classification"""
    hash_threshold: int = 5  # Max differing bits for "similar"
    hash_algorithm: str = "phash"  # Options: phash, dhash, ahash, whash
    hash_size: int = 8
    max_image_pixels: int = 100_000_000  # 100MP limit
    delete: bool = False


@dataclass
class SystemConfig:
    """System-wide configuration"""
    n_workers: int = field(default_factory=mp.cpu_count)
    log_level: str = "WARNING"
    log_dir: str = ""  # Empty disables the log file
    color: bool = True
    progress_style: str = "lines"  # Options: lines, bar

    # Duplicate classification
    dedup: DedupConfig = field(default_factory=DedupConfig)

    def save(self, path: str = "config.yaml"):
        """Save configuration to YAML file"""
        config_dict = {
            'n_workers': self.n_workers,
            'log_level': self.log_level,
            'log_dir': self.log_dir,
            'color': self.color,
            'progress_style': self.progress_style,
            'dedup': {
                'hash_threshold': self.dedup.hash_threshold,
                'hash_algorithm': self.dedup.hash_algorithm,
                'hash_size': self.dedup.hash_size,
                'max_image_pixels': self.dedup.max_image_pixels,
                'delete': self.dedup.delete
            }
        }

        with open(path, 'w') as f:
            yaml.dump(config_dict, f, default_flow_style=False, indent=2)

    @classmethod
    def load(cls, path: str = "config.yaml") -> 'SystemConfig':
        """Load configuration from YAML file"""
        if not Path(path).exists():
            return cls()  # Return default config

        with open(path, 'r') as f:
            config_dict = yaml.safe_load(f) or {}

        config = cls()

        # Load system settings
        config.n_workers = config_dict.get('n_workers', config.n_workers)
        config.log_level = config_dict.get('log_level', config.log_level)
        config.log_dir = config_dict.get('log_dir', config.log_dir)
        config.color = config_dict.get('color', config.color)
        config.progress_style = config_dict.get('progress_style', config.progress_style)

        # Load duplicate classification settings
        if 'dedup' in config_dict:
            dd = config_dict['dedup']
            config.dedup = DedupConfig(
                hash_threshold=dd.get('hash_threshold', config.dedup.hash_threshold),
                hash_algorithm=dd.get('hash_algorithm', config.dedup.hash_algorithm),
                hash_size=dd.get('hash_size', config.dedup.hash_size),
                max_image_pixels=dd.get('max_image_pixels', config.dedup.max_image_pixels),
                delete=dd.get('delete', config.dedup.delete)
            )

        return config
