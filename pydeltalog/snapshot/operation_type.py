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


class OperationType(str, Enum):
    """
    Operation recorded in a commit's ``commitInfo.operation``.

    COMBINED marks a snapshot folded from commits of different operations. UNKNOWN
    stands for an operation name not listed here; writers add new ones over time.
    """
    WRITE = "WRITE"
    STREAMING_UPDATE = "STREAMING UPDATE"
    DELETE = "DELETE"
    UPDATE = "UPDATE"
    MERGE = "MERGE"
    TRUNCATE = "TRUNCATE"
    OPTIMIZE = "OPTIMIZE"
    REORG = "REORG"
    CREATE_TABLE = "CREATE TABLE"
    CREATE_TABLE_AS_SELECT = "CREATE TABLE AS SELECT"
    REPLACE_TABLE = "REPLACE TABLE"
    REPLACE_TABLE_AS_SELECT = "REPLACE TABLE AS SELECT"
    CREATE_OR_REPLACE_TABLE = "CREATE OR REPLACE TABLE"
    CREATE_OR_REPLACE_TABLE_AS_SELECT = "CREATE OR REPLACE TABLE AS SELECT"
    CLONE = "CLONE"
    ADD_COLUMNS = "ADD COLUMNS"
    DROP_COLUMNS = "DROP COLUMNS"
    RENAME_COLUMN = "RENAME COLUMN"
    CHANGE_COLUMN = "CHANGE COLUMN"
    REPLACE_COLUMNS = "REPLACE COLUMNS"
    ADD_CONSTRAINT = "ADD CONSTRAINT"
    DROP_CONSTRAINT = "DROP CONSTRAINT"
    SET_TBLPROPERTIES = "SET TBLPROPERTIES"
    UNSET_TBLPROPERTIES = "UNSET TBLPROPERTIES"
    UPGRADE_PROTOCOL = "UPGRADE PROTOCOL"
    CONVERT = "CONVERT"
    RESTORE = "RESTORE"
    FSCK = "FSCK"
    MANUAL_UPDATE = "MANUAL UPDATE"
    VACUUM_START = "VACUUM START"
    VACUUM_END = "VACUUM END"
    UNKNOWN = "UNKNOWN"
    COMBINED = "COMBINED"

    @staticmethod
    def from_string(value, strict: bool = True) -> 'OperationType':
        """
        Resolve an operation tag. Accepts the enum itself, the log spelling
        (``"CREATE TABLE"``) or the member name (``"CREATE_TABLE"``), case-insensitively.

        Args:
            value: The tag to resolve.
            strict: If False, a name that is not listed resolves to UNKNOWN instead of
                raising. Empty and non-string values are rejected either way.
        """
        if isinstance(value, OperationType):
            return value
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"Invalid operation type: {value!r}")
        normalized = " ".join(value.strip().upper().split())
        for member in OperationType:
            if member.value == normalized:
                return member
        try:
            return OperationType[normalized.replace(" ", "_")]
        except KeyError:
            if not strict:
                return OperationType.UNKNOWN
            raise ValueError(
                f"Unknown operation type '{value}'. "
                f"Valid values: {[e.value for e in OperationType]}"
            )

    @staticmethod
    def reconcile(left: 'OperationType', right: 'OperationType') -> 'OperationType':
        return left if left == right else OperationType.COMBINED
