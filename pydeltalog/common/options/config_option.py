################################################################################
#  Licensed to the Apache Software Foundation (ASF) under one
#  or more contributor license agreements.  See the NOTICE file
#  distributed with this work for additional information
#  regarding copyright ownership.  The ASF licenses this file
#  to you under the Apache License, Version 2.0 (the
#  "License"); you may not use this file except in compliance
#  with the License.  You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
# limitations under the License.
################################################################################

from typing import Any, Generic, Optional, Type, TypeVar

T = TypeVar('T')


class ConfigOption(Generic[T]):
    """
    A ConfigOption describes one snapshot-engine setting: its key, the type its raw
    value is converted to, and an optional default. Options are built via
    ConfigOptions and are immutable once created.
    """

    def __init__(self,
                 key: str,
                 clazz: Type,
                 description: Optional[str] = None,
                 default_value: Any = None):
        if not key:
            raise ValueError("Key must not be null.")

        self._key = key
        self._clazz = clazz
        self._description = description or ""
        self._default_value = default_value

    def key(self) -> str:
        return self._key

    def get_clazz(self) -> Type:
        return self._clazz

    def default_value(self) -> Any:
        return self._default_value

    def with_description(self, description: str) -> 'ConfigOption[T]':
        """Returns a copy of this option carrying the given description."""
        return ConfigOption(
            key=self._key,
            clazz=self._clazz,
            description=description,
            default_value=self._default_value,
        )
