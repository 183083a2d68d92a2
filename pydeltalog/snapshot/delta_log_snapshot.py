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

import copy
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Tuple

import pyarrow

from pydeltalog.snapshot.operation_type import OperationType


@dataclass(eq=True)
class DeltaLogSnapshot:
    """
    Table state delta as of one version of a delta transaction log.

    A snapshot is built per commit (or per checkpoint part) and snapshots are folded
    together with ``merge``. ``schema`` and ``partition_columns`` are ``None`` when the
    folded commits never recorded a metadata action; an empty ``partition_columns``
    tuple means the table is explicitly unpartitioned.

    The version is assigned once after construction, when the position of the commit in
    the log is known. Equality is structural over every field; ordering only looks at
    the version.

    ``metadata_version`` is the version of the commit that schema, partition columns and
    timestamp were taken from. It equals ``version_id`` for a single commit and is
    carried through merges.
    """
    operation_type: OperationType
    net_files_added: int
    net_bytes_added: int
    net_output_rows: int
    total_file_entries: int
    timestamp: int
    contains_checkpoint: bool = False
    schema: Optional[Any] = None
    partition_columns: Optional[Tuple[str, ...]] = None
    version_id: Optional[int] = field(default=None, init=False)
    metadata_version: Optional[int] = field(default=None, init=False)

    def __post_init__(self):
        self.operation_type = OperationType.from_string(self.operation_type)
        for name in ("net_files_added", "net_bytes_added", "net_output_rows",
                     "total_file_entries", "timestamp"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an int, got {value!r}")
        self.set_schema(self.schema, self.partition_columns)

    def get_operation_type(self) -> OperationType:
        return self.operation_type

    def get_net_files_added(self) -> int:
        return self.net_files_added

    def get_net_bytes_added(self) -> int:
        return self.net_bytes_added

    def get_net_output_rows(self) -> int:
        return self.net_output_rows

    def get_total_file_entries(self) -> int:
        return self.total_file_entries

    def get_timestamp(self) -> int:
        return self.timestamp

    def is_checkpoint(self) -> bool:
        return self.contains_checkpoint

    def get_schema(self) -> Optional[Any]:
        return self.schema

    def get_partition_columns(self) -> Optional[Tuple[str, ...]]:
        return self.partition_columns

    def get_version_id(self) -> Optional[int]:
        return self.version_id

    def has_metadata(self) -> bool:
        return self.schema is not None

    def get_arrow_schema(self) -> Optional[pyarrow.Schema]:
        """The recorded schema as a pyarrow schema, or None if no commit recorded one."""
        if self.schema is None:
            return None
        from pydeltalog.schema.delta_schema import DeltaSchemaParser
        return DeltaSchemaParser.to_pyarrow_schema(self.schema)

    def set_schema(self, schema: Any, partition_columns: Optional[Sequence[str]]):
        """
        Records the metadata action of a commit. Schema and partition columns come from the
        same action, so they are either both recorded or both absent.
        Recording metadata on a snapshot that already has a version makes that version
        the metadata version.
        """
        if (schema is None) != (partition_columns is None):
            raise ValueError(
                f"Schema and partition columns must be recorded together, "
                f"got schema {schema!r} and partition columns {partition_columns!r}")
        self.schema = schema
        self.partition_columns = _normalize_partition_columns(partition_columns)
        if schema is not None and self.version_id is not None:
            self.metadata_version = self.version_id

    def set_version_id(self, version_id: int):
        if self.version_id is not None:
            raise ValueError(
                f"Version of snapshot is already set to {self.version_id}, cannot set it to {version_id}")
        if isinstance(version_id, bool) or not isinstance(version_id, int) or version_id < 0:
            raise ValueError(f"Snapshot version must be a non-negative int, got {version_id!r}")
        self.version_id = version_id
        if self.metadata_version is None:
            self.metadata_version = version_id

    def clone(self) -> 'DeltaLogSnapshot':
        return copy.deepcopy(self)

    def merge(self, other: 'DeltaLogSnapshot', merger=None):
        """
        Fold ``other`` into this snapshot in place. ``other`` is left unchanged.

        Raises:
            UnsupportedRepartitionException: both sides record different partition columns
            DuplicateVersionException: both sides carry the same version and the merger
                rejects equal versions
        """
        from pydeltalog.snapshot.snapshot_merger import SnapshotMerger

        merged = (merger or SnapshotMerger.default()).fold(self, other)
        self.operation_type = merged.operation_type
        self.net_files_added = merged.net_files_added
        self.net_bytes_added = merged.net_bytes_added
        self.net_output_rows = merged.net_output_rows
        self.total_file_entries = merged.total_file_entries
        self.timestamp = merged.timestamp
        self.contains_checkpoint = merged.contains_checkpoint
        self.schema = merged.schema
        self.partition_columns = merged.partition_columns
        self.version_id = merged.version_id
        self.metadata_version = merged.metadata_version
        return self

    def compare_to(self, other: 'DeltaLogSnapshot') -> int:
        """Negative, zero or positive as this version is lower, equal or higher."""
        left, right = self._require_version(), other._require_version()
        return (left > right) - (left < right)

    def __lt__(self, other):
        if not isinstance(other, DeltaLogSnapshot):
            return NotImplemented
        return self.compare_to(other) < 0

    def __le__(self, other):
        if not isinstance(other, DeltaLogSnapshot):
            return NotImplemented
        return self.compare_to(other) <= 0

    def __gt__(self, other):
        if not isinstance(other, DeltaLogSnapshot):
            return NotImplemented
        return self.compare_to(other) > 0

    def __ge__(self, other):
        if not isinstance(other, DeltaLogSnapshot):
            return NotImplemented
        return self.compare_to(other) >= 0

    def _require_version(self) -> int:
        if self.version_id is None:
            raise ValueError(f"Snapshot has no version assigned: {self!r}")
        return self.version_id


def _normalize_partition_columns(partition_columns) -> Optional[Tuple[str, ...]]:
    if partition_columns is None:
        return None
    if isinstance(partition_columns, str):
        raise ValueError(f"Partition columns must be a sequence of names, got {partition_columns!r}")
    columns = tuple(partition_columns)
    for column in columns:
        if not isinstance(column, str):
            raise ValueError(f"Partition column names must be strings, got {column!r}")
    return columns
