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
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from pydeltalog.common.options import Options
from pydeltalog.snapshot.delta_log_snapshot import DeltaLogSnapshot
from pydeltalog.snapshot.snapshot_merger import SnapshotMerger
from pydeltalog.snapshot.snapshot_options import SnapshotOptions

logger = logging.getLogger(__name__)


class SnapshotFolder:
    """Reduces many per-commit snapshots to one cumulative snapshot."""

    def __init__(self, options: Optional[Options] = None):
        self.options = SnapshotOptions(options)
        self.merger = SnapshotMerger(options)

    def fold_all(self, snapshots: Iterable[DeltaLogSnapshot]) -> DeltaLogSnapshot:
        snapshots = list(snapshots)
        if not snapshots:
            raise ValueError("Cannot fold an empty list of snapshots")

        result = snapshots[0]
        for snapshot in snapshots[1:]:
            result = self.merger.fold(result, snapshot)
        if len(snapshots) == 1:
            result = result.clone()
        logger.info("Folded %d snapshots up to version %d", len(snapshots), result.version_id)
        return result

    def tree_fold(self, snapshots: Iterable[DeltaLogSnapshot], max_workers: Optional[int] = None) -> DeltaLogSnapshot:
        """
        Merges snapshots pairwise, level by level, with the pairs of one level merged
        concurrently. Every pair produces a new snapshot, so no instance is written by
        more than one thread.
        """
        level: List[DeltaLogSnapshot] = list(snapshots)
        if not level:
            raise ValueError("Cannot fold an empty list of snapshots")
        count = len(level)
        workers = max_workers or self.options.fold_max_workers()

        if count == 1:
            return level[0].clone()

        with ThreadPoolExecutor(max_workers=workers) as executor:
            while len(level) > 1:
                pairs = [(level[i], level[i + 1]) for i in range(0, len(level) - 1, 2)]
                merged = list(executor.map(lambda pair: self.merger.fold(*pair), pairs))
                if len(level) % 2 == 1:
                    merged.append(level[-1])
                level = merged

        logger.info("Tree folded %d snapshots up to version %d", count, level[0].version_id)
        return level[0]

    @staticmethod
    def latest(snapshots: Iterable[DeltaLogSnapshot]) -> Optional[DeltaLogSnapshot]:
        """The snapshot with the highest version, or None for no snapshots."""
        return max(snapshots, default=None)
