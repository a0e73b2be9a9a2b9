"""pybeans Transformer — object-graph transformation engine."""

from pybeans.transformer.bean_transformer import BeanTransformer, TransformResult
from pybeans.transformer.port import TransformerPort
from pybeans.transformer.settings import TransformerProperties, TransformerSettings

__all__ = [
    "BeanTransformer",
    "TransformResult",
    "TransformerPort",
    "TransformerProperties",
    "TransformerSettings",
]
