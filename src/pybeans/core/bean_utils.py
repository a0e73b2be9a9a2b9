# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""BeanUtils — entry point handing out configured transformers and validators.

Example::

    bean_utils = BeanUtils.from_config(Config.from_file("pybeans.yaml"))
    dto = bean_utils.get_transformer().transform(entity, EntityDTO)
"""

from __future__ import annotations

from pybeans.core.config import Config
from pybeans.shape.analyzer import ShapeAnalyzer
from pybeans.transformer.bean_transformer import BeanTransformer
from pybeans.transformer.settings import TransformerProperties, TransformerSettings
from pybeans.validation.validator import Validator


class BeanUtils:
    """Factory for :class:`BeanTransformer` and :class:`Validator` instances.

    Every call to :meth:`get_transformer` returns a new, independently
    configurable transformer seeded with the same properties.
    """

    def __init__(self, properties: TransformerProperties | None = None) -> None:
        self._properties = properties or TransformerProperties()
        self._analyzer = ShapeAnalyzer()

    @classmethod
    def from_config(cls, config: Config) -> BeanUtils:
        """Seed transformers from the ``pybeans.transformer`` configuration section."""
        return cls(config.bind(TransformerProperties))

    @property
    def properties(self) -> TransformerProperties:
        return self._properties

    def get_transformer(self) -> BeanTransformer:
        return BeanTransformer(
            TransformerSettings.from_properties(self._properties),
            analyzer=self._analyzer,
            validator=self.get_validator(),
        )

    def get_validator(self) -> Validator:
        return Validator(self._analyzer)
