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

from pydeltalog.common.options import Options
from pydeltalog.snapshot.delta_log_snapshot import DeltaLogSnapshot
from pydeltalog.snapshot.operation_type import OperationType
from pydeltalog.snapshot.snapshot_builder import SnapshotBuilder
from pydeltalog.snapshot.snapshot_exception import (DuplicateVersionException,
                                                    SnapshotException,
                                                    UnsupportedRepartitionException)
from pydeltalog.snapshot.snapshot_folder import SnapshotFolder
from pydeltalog.snapshot.snapshot_merger import SnapshotMerger
from pydeltalog.snapshot.snapshot_options import (EqualVersionPolicy,
                                                  SnapshotOptions)

__all__ = [
    'DeltaLogSnapshot',
    'DuplicateVersionException',
    'EqualVersionPolicy',
    'OperationType',
    'Options',
    'SnapshotBuilder',
    'SnapshotException',
    'SnapshotFolder',
    'SnapshotMerger',
    'SnapshotOptions',
    'UnsupportedRepartitionException',
]
