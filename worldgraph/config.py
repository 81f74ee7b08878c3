import numbers
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, List, Mapping, Union

from omegaconf import DictConfig, OmegaConf


@dataclass(frozen=True)
class Settings:
    """Immutable process configuration, resolved once at startup."""

    db_path: str = "db.sqlite"
    port: int = 3000
    public_dir: str = "public"
    log_level: str = "INFO"
    ollama_host: str = "http://localhost"
    ollama_port: int = 11434
    model_name: str = "neural-chat"
    temperature: float = 0.4
    strategy: str = "simple"
    samples: int = 3
    timeout: float = 120.0

    FIELD_META = {
        "db_path": {"type": "str", "allow_blank": False},
        "port": {"type": "int", "min": 0, "max": 65535},
        "public_dir": {"type": "str"},
        "log_level": {
            "type": "str",
            "choices": {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"},
            "normalize": "upper",
        },
        "ollama_host": {"type": "str", "allow_blank": False},
        "ollama_port": {"type": "int", "min": 1, "max": 65535},
        "model_name": {"type": "str", "allow_blank": False},
        "temperature": {"type": "float", "min": 0.0},
        "strategy": {
            "type": "str",
            "choices": {"simple", "single", "sample", "sampled"},
            "normalize": "lower",
        },
        "samples": {"type": "int", "min": 1, "max": 255},
        "timeout": {"type": "float", "min_exclusive": 0.0},
    }

    # Hydra group -> {config key: settings field}
    GROUPS = {
        "database": {"db_path": "db_path"},
        "server": {"port": "port", "public_dir": "public_dir", "log_level": "log_level"},
        "model": {
            "host": "ollama_host",
            "port": "ollama_port",
            "name": "model_name",
            "temperature": "temperature",
            "strategy": "strategy",
            "samples": "samples",
            "timeout": "timeout",
        },
    }

    TYPE_LABELS = {
        "int": "an integer",
        "float": "a float",
        "str": "a string",
    }

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "Settings":
        """Validate flat ``values`` and build a Settings instance.

        Unknown keys raise ``KeyError``; every invalid value is reported in a
        single ``ValueError``.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise KeyError("Unknown settings: " + ", ".join(sorted(unknown)))

        data: Dict[str, Any] = {}
        errors: List[str] = []
        for name, meta in cls.FIELD_META.items():
            if name not in values:
                continue
            try:
                value = cls._cast_value(name, values[name], meta)
                cls._validate_constraints(name, value, meta)
            except (TypeError, ValueError) as exc:
                errors.append(str(exc))
                continue
            data[name] = value

        if errors:
            raise ValueError("Invalid configuration: " + "; ".join(errors))
        return cls(**data)

    @classmethod
    def from_omegaconf(cls, config: Union[DictConfig, Mapping[str, Any]]) -> "Settings":
        """Flatten the Hydra config groups into Settings."""
        if config is None:
            raise ValueError("Configuration cannot be None.")
        if isinstance(config, DictConfig):
            config = OmegaConf.to_container(config, resolve=True)
        if not isinstance(config, Mapping):
            raise TypeError("Configuration must be a mapping or DictConfig-compatible object.")

        flat: Dict[str, Any] = {}
        for group, keys in cls.GROUPS.items():
            section = config.get(group) or {}
            for key, field_name in keys.items():
                if key in section:
                    flat[field_name] = section[key]
        return cls.from_mapping(flat)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def ollama_url(self) -> str:
        return f"{self.ollama_host.rstrip('/')}:{self.ollama_port}"

    @classmethod
    def _cast_value(cls, name: str, value: Any, meta: Dict[str, Any]) -> Any:
        if value is None:
            raise TypeError(f"Parameter '{name}' cannot be null.")

        type_name = meta["type"]
        if type_name == "int":
            return cls._cast_int(name, value)
        if type_name == "float":
            return cls._cast_float(name, value)
        if type_name == "str":
            return cls._cast_str(name, value, meta)
        raise TypeError(f"Unsupported type declaration for '{name}'.")

    @classmethod
    def _cast_int(cls, name: str, value: Any) -> int:
        if isinstance(value, bool):
            raise cls._type_error(name, "int", value)
        if isinstance(value, numbers.Integral):
            return int(value)
        if isinstance(value, numbers.Real) and float(value).is_integer():
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip(), 10)
            except ValueError as exc:
                raise cls._type_error(name, "int", value) from exc
        raise cls._type_error(name, "int", value)

    @classmethod
    def _cast_float(cls, name: str, value: Any) -> float:
        if isinstance(value, bool):
            raise cls._type_error(name, "float", value)
        if isinstance(value, numbers.Real):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value.strip())
            except ValueError as exc:
                raise cls._type_error(name, "float", value) from exc
        raise cls._type_error(name, "float", value)

    @classmethod
    def _cast_str(cls, name: str, value: Any, meta: Dict[str, Any]) -> str:
        if isinstance(value, bool):
            raise cls._type_error(name, "str", value)
        text = str(value).strip()
        if meta.get("normalize") == "lower":
            text = text.lower()
        elif meta.get("normalize") == "upper":
            text = text.upper()
        return text

    @classmethod
    def _type_error(cls, name: str, type_name: str, value: Any) -> TypeError:
        label = cls.TYPE_LABELS.get(type_name, type_name)
        return TypeError(
            f"Parameter '{name}' must be {label} (received {value!r} of type {type(value).__name__})."
        )

    @staticmethod
    def _validate_constraints(name: str, value: Any, meta: Dict[str, Any]) -> None:
        if meta.get("allow_blank") is False and isinstance(value, str) and value == "":
            raise ValueError(f"Parameter '{name}' cannot be empty.")

        choices = meta.get("choices")
        if choices and value not in choices:
            allowed = ", ".join(sorted(choices))
            raise ValueError(
                f"Parameter '{name}' must be one of: {allowed} (received {value!r})."
            )

        min_value = meta.get("min")
        if min_value is not None and value < min_value:
            raise ValueError(
                f"Parameter '{name}' must be greater than or equal to {min_value} (received {value})."
            )

        min_exclusive = meta.get("min_exclusive")
        if min_exclusive is not None and value <= min_exclusive:
            raise ValueError(
                f"Parameter '{name}' must be greater than {min_exclusive} (received {value})."
            )

        max_value = meta.get("max")
        if max_value is not None and value > max_value:
            raise ValueError(
                f"Parameter '{name}' must be less than or equal to {max_value} (received {value})."
            )
