"""chainQL schema models: builder settings and call-argument operands."""
from chainql.schema.operands import ColumnOperand, ParamOperand, ValueOperand
from chainql.schema.settings import DEFAULT_SETTINGS, BuilderSettings

__all__ = [
    "BuilderSettings",
    "DEFAULT_SETTINGS",
    "ColumnOperand",
    "ParamOperand",
    "ValueOperand",
]
