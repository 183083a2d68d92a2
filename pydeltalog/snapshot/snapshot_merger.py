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
import logging
from typing import Optional

from pydeltalog.common.options import Options
from pydeltalog.snapshot.delta_log_snapshot import DeltaLogSnapshot
from pydeltalog.snapshot.operation_type import OperationType
from pydeltalog.snapshot.snapshot_exception import (DuplicateVersionException,
                                                    UnsupportedRepartitionException)
from pydeltalog.snapshot.snapshot_options import (EqualVersionPolicy,
                                                  SnapshotOptions)

logger = logging.getLogger(__name__)


class SnapshotMerger:
    """
    Combines two delta log snapshots into one.

    ``fold`` never mutates its arguments. For snapshots with distinct versions and
    compatible partitioning the result does not depend on argument order or on how a
    larger set of snapshots is grouped into pairs:

    - counters are summed,
    - the version is the max of both versions,
    - schema, partition columns and timestamp come from the latest commit that recorded
      a metadata action; if no commit did, the timestamp of the earliest commit is kept.
      For two single commits this is the newer side if it recorded a schema, otherwise
      the older side,
    - the operation type is kept if both sides agree, otherwise it becomes COMBINED.
    """

    _DEFAULT: Optional['SnapshotMerger'] = None

    def __init__(self, options: Optional[Options] = None):
        self.options = SnapshotOptions(options)
        self.equal_version_policy = self.options.equal_version_policy()

    @classmethod
    def default(cls) -> 'SnapshotMerger':
        if cls._DEFAULT is None:
            cls._DEFAULT = cls()
        return cls._DEFAULT

    def fold(self, receiver: DeltaLogSnapshot, other: DeltaLogSnapshot) -> DeltaLogSnapshot:
        newer, older = self._order(receiver, other)
        self._check_partitioning(newer, older)

        metadata_source = self._metadata_source(newer, older)
        merged = DeltaLogSnapshot(
            operation_type=OperationType.reconcile(receiver.operation_type, other.operation_type),
            net_files_added=receiver.net_files_added + other.net_files_added,
            net_bytes_added=receiver.net_bytes_added + other.net_bytes_added,
            net_output_rows=receiver.net_output_rows + other.net_output_rows,
            total_file_entries=receiver.total_file_entries + other.total_file_entries,
            timestamp=metadata_source.timestamp,
            contains_checkpoint=receiver.contains_checkpoint or other.contains_checkpoint,
            schema=copy.deepcopy(metadata_source.schema),
            partition_columns=metadata_source.partition_columns,
        )
        merged.set_version_id(newer.version_id)
        merged.metadata_version = metadata_source.metadata_version

        logger.debug("Merged snapshot version %d into version %d, result: %s",
                     older.version_id, newer.version_id, merged)
        return merged

    def _order(self, receiver: DeltaLogSnapshot, other: DeltaLogSnapshot):
        receiver_version = receiver.get_version_id()
        other_version = other.get_version_id()
        if receiver_version is None or other_version is None:
            raise ValueError(
                f"Cannot merge snapshots without a version: {receiver_version} and {other_version}")

        if receiver_version == other_version:
            if self.equal_version_policy == EqualVersionPolicy.REJECT:
                raise DuplicateVersionException(receiver_version)
            logger.warning("Merging two snapshots with the same version %d, the receiver is treated as newer",
                           receiver_version)
            return receiver, other

        if receiver_version > other_version:
            return receiver, other
        return other, receiver

    @staticmethod
    def _metadata_source(newer: DeltaLogSnapshot, older: DeltaLogSnapshot) -> DeltaLogSnapshot:
        # Metadata recorded by the latest commit wins. Without any metadata, the timestamp
        # of the earliest commit is kept.
        def rank(snapshot: DeltaLogSnapshot):
            if snapshot.has_metadata():
                return 1, snapshot.metadata_version
            return 0, -snapshot.metadata_version

        return older if rank(older) > rank(newer) else newer

    @staticmethod
    def _check_partitioning(newer: DeltaLogSnapshot, older: DeltaLogSnapshot):
        # A commit without a metadata action says nothing about partitioning.
        if newer.partition_columns is None or older.partition_columns is None:
            return
        if newer.partition_columns != older.partition_columns:
            logger.error("Partition columns changed from %s at version %d to %s at version %d",
                         list(older.partition_columns), older.version_id,
                         list(newer.partition_columns), newer.version_id)
            raise UnsupportedRepartitionException(
                older.partition_columns, newer.partition_columns,
                older.version_id, newer.version_id)
