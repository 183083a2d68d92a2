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

from enum import Enum

from pydeltalog.common.options import Options
from pydeltalog.common.options.config_option import ConfigOption
from pydeltalog.common.options.config_options import ConfigOptions


class EqualVersionPolicy(str, Enum):
    """
    What to do when two snapshots carrying the same version are merged.
    """
    REJECT = "reject"
    RECEIVER_WINS = "receiver-wins"


class SnapshotOptions:
    """Options for merging and folding delta log snapshots."""

    EQUAL_VERSION_POLICY: ConfigOption[EqualVersionPolicy] = (
        ConfigOptions.key("snapshot.merge.equal-version-policy")
        .enum_type(EqualVersionPolicy)
        .default_value(EqualVersionPolicy.REJECT)
        .with_description(
            "How a merge of two snapshots with the same version is handled. "
            "'reject' fails the merge, since folding the same commit twice double counts "
            "files, bytes and rows. 'receiver-wins' treats the receiver as the newer side."
        )
    )

    FOLD_MAX_WORKERS: ConfigOption[int] = (
        ConfigOptions.key("snapshot.fold.max-workers")
        .int_type()
        .default_value(4)
        .with_description("Number of threads used to merge snapshot pairs in a tree fold.")
    )

    def __init__(self, options: Options = None):
        self.options = options if options is not None else Options.from_none()

    def equal_version_policy(self) -> EqualVersionPolicy:
        return self.options.get(SnapshotOptions.EQUAL_VERSION_POLICY)

    def fold_max_workers(self) -> int:
        workers = self.options.get(SnapshotOptions.FOLD_MAX_WORKERS)
        if workers < 1:
            raise ValueError(f"{SnapshotOptions.FOLD_MAX_WORKERS.key()} must be positive, got {workers}")
        return workers
