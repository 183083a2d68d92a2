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

"""
Already-parsed delta log actions.

One commit file of a delta table holds one action per line. Decoding those lines is done
by the log reader; this module only describes the decoded shape the snapshot builder
consumes.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


def _num_records(stats: Optional[Union[str, Dict[str, Any]]]) -> Optional[int]:
    if stats is None:
        return None
    if isinstance(stats, str):
        if not stats.strip():
            return None
        stats = json.loads(stats)
    num_records = stats.get("numRecords")
    return int(num_records) if num_records is not None else None


@dataclass
class AddFile:
    path: str
    size: Optional[int] = None
    partition_values: Dict[str, Optional[str]] = field(default_factory=dict)
    modification_time: Optional[int] = None
    data_change: bool = True
    # Either the raw stats JSON string or its decoded dict.
    stats: Optional[Union[str, Dict[str, Any]]] = None

    def num_records(self) -> Optional[int]:
        return _num_records(self.stats)


@dataclass
class RemoveFile:
    path: str
    size: Optional[int] = None
    deletion_timestamp: Optional[int] = None
    data_change: bool = True
    stats: Optional[Union[str, Dict[str, Any]]] = None

    def num_records(self) -> Optional[int]:
        return _num_records(self.stats)


@dataclass
class Metadata:
    id: str
    schema_string: str
    partition_columns: List[str] = field(default_factory=list)
    name: Optional[str] = None
    description: Optional[str] = None
    format_provider: str = "parquet"
    configuration: Dict[str, str] = field(default_factory=dict)
    created_time: Optional[int] = None


@dataclass
class Protocol:
    min_reader_version: int = 1
    min_writer_version: int = 2


@dataclass
class CommitInfo:
    operation: str
    timestamp: Optional[int] = None
    operation_parameters: Dict[str, Any] = field(default_factory=dict)
    operation_metrics: Dict[str, Any] = field(default_factory=dict)
    read_version: Optional[int] = None
    is_blind_append: Optional[bool] = None

    def metric(self, name: str) -> Optional[int]:
        # Metrics are written as strings in commit files.
        value = self.operation_metrics.get(name)
        return int(value) if value is not None else None


Action = Union[AddFile, RemoveFile, Metadata, Protocol, CommitInfo]
