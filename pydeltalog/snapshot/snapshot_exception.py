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

from typing import Optional, Sequence


class SnapshotException(Exception):
    """Base snapshot exception"""


class UnsupportedRepartitionException(SnapshotException):
    """Partition columns differ between two snapshots that both record them"""

    def __init__(self, previous_partition_columns: Sequence[str], new_partition_columns: Sequence[str],
                 previous_version: Optional[int] = None, new_version: Optional[int] = None):
        self.previous_partition_columns = tuple(previous_partition_columns)
        self.new_partition_columns = tuple(new_partition_columns)
        self.previous_version = previous_version
        self.new_version = new_version
        super().__init__(
            f"Repartitioning is not supported: partition columns changed from "
            f"{list(self.previous_partition_columns)} (version {previous_version}) to "
            f"{list(self.new_partition_columns)} (version {new_version})")


class DuplicateVersionException(SnapshotException):
    """Two snapshots with the same version were merged"""

    def __init__(self, version: int):
        self.version = version
        super().__init__(f"Cannot merge two snapshots with the same version {version}")
