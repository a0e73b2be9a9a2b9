"""pybeans core — configuration binding.

The :class:`~pybeans.core.bean_utils.BeanUtils` facade lives in
``pybeans.core.bean_utils`` and is imported from there.
"""

from pybeans.core.config import Config, config_properties

__all__ = ["Config", "config_properties"]
