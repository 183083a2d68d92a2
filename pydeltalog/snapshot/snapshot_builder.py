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

import logging
from typing import Iterable, List, Optional

from pydeltalog.delta.actions import (Action, AddFile, CommitInfo, Metadata,
                                      Protocol, RemoveFile)
from pydeltalog.snapshot.delta_log_snapshot import DeltaLogSnapshot
from pydeltalog.snapshot.operation_type import OperationType
from pydeltalog.snapshot.snapshot_merger import SnapshotMerger

logger = logging.getLogger(__name__)


class SnapshotBuilder:
    """
    Builds the snapshot of a single commit (or checkpoint part) from its parsed actions.

    Usage::

        snapshot = SnapshotBuilder().add_actions(actions).build(version=3)
    """

    def __init__(self, checkpoint: bool = False, file_modification_time: Optional[int] = None,
                 merger: Optional[SnapshotMerger] = None):
        self.checkpoint = checkpoint
        self.file_modification_time = file_modification_time
        self.merger = merger
        self._adds: List[AddFile] = []
        self._removes: List[RemoveFile] = []
        self._metadata: Optional[Metadata] = None
        self._commit_info: Optional[CommitInfo] = None

    def add_action(self, action: Action) -> 'SnapshotBuilder':
        if isinstance(action, AddFile):
            self._adds.append(action)
        elif isinstance(action, RemoveFile):
            self._removes.append(action)
        elif isinstance(action, Metadata):
            if self._metadata is not None:
                raise ValueError("A commit must not contain more than one metadata action")
            self._metadata = action
        elif isinstance(action, CommitInfo):
            if self._commit_info is not None:
                raise ValueError("A commit must not contain more than one commitInfo action")
            self._commit_info = action
        elif isinstance(action, Protocol):
            pass
        else:
            raise ValueError(f"Unsupported delta log action: {action!r}")
        return self

    def add_actions(self, actions: Iterable[Action]) -> 'SnapshotBuilder':
        for action in actions:
            self.add_action(action)
        return self

    def build(self, version: int) -> DeltaLogSnapshot:
        # Remove actions in a checkpoint are tombstones and only count as entries read.
        removes = [] if self.checkpoint else self._removes
        snapshot = DeltaLogSnapshot(
            operation_type=self._operation_type(version),
            net_files_added=len(self._adds) - len(removes),
            net_bytes_added=sum(a.size or 0 for a in self._adds) - sum(r.size or 0 for r in removes),
            net_output_rows=self._net_output_rows(removes),
            total_file_entries=len(self._adds) + len(self._removes),
            timestamp=self._timestamp(version),
            contains_checkpoint=self.checkpoint,
        )
        if self._metadata is not None:
            snapshot.set_schema(self._metadata.schema_string, self._metadata.partition_columns)
        snapshot.set_version_id(version)
        logger.debug("Built snapshot for version %d: %s", version, snapshot)
        return snapshot

    def build_from(self, prior: Optional[DeltaLogSnapshot], version: int) -> DeltaLogSnapshot:
        """Folds this commit onto a copy of ``prior``; ``prior`` itself is not modified."""
        snapshot = self.build(version)
        if prior is None:
            return snapshot
        return prior.clone().merge(snapshot, self.merger)

    def _operation_type(self, version: int) -> OperationType:
        if self._commit_info is None:
            return OperationType.WRITE
        operation_type = OperationType.from_string(self._commit_info.operation, strict=False)
        if operation_type == OperationType.UNKNOWN:
            logger.warning("Unrecognized operation '%s' in version %d, recorded as %s",
                           self._commit_info.operation, version, operation_type.value)
        return operation_type

    def _timestamp(self, version: int) -> int:
        if self._commit_info is not None and self._commit_info.timestamp is not None:
            return self._commit_info.timestamp
        if self.file_modification_time is not None:
            return self.file_modification_time
        times = [a.modification_time for a in self._adds if a.modification_time is not None]
        if times:
            return max(times)
        logger.warning("No timestamp recorded for version %d, using 0", version)
        return 0

    def _net_output_rows(self, removes: List[RemoveFile]) -> int:
        added = [a.num_records() for a in self._adds]
        removed = [r.num_records() for r in removes]
        if all(n is not None for n in added + removed):
            return sum(added) - sum(removed)

        # Remove actions usually carry no stats, fall back to the commit metrics.
        commit_info = self._commit_info
        if commit_info is None:
            logger.warning("Files without statistics and no commit metrics, row count taken from stats only")
            return sum(n for n in added if n is not None) - sum(n for n in removed if n is not None)
        if commit_info.metric("numTargetRowsInserted") is not None:
            return (commit_info.metric("numTargetRowsInserted")
                    - (commit_info.metric("numTargetRowsDeleted") or 0))
        return (commit_info.metric("numOutputRows") or 0) - (commit_info.metric("numDeletedRows") or 0)
