# timetable_engine/errors.py


class InputError(ValueError):
    """Descriptor de curso mal formado (tipo o créditos ausentes/ inválidos)."""


class ConfigError(ValueError):
    """Archivo de configuración con valores que no se pueden interpretar."""
