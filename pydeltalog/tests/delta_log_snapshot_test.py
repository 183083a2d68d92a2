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

import unittest

import pyarrow

from pydeltalog import (DeltaLogSnapshot, OperationType,
                        UnsupportedRepartitionException)

SCHEMA_STRING = ('{"type":"struct","fields":['
                 '{"name":"id","type":"long","nullable":true,"metadata":{}},'
                 '{"name":"name","type":"string","nullable":true,"metadata":{}}]}')


def _snapshot(version, operation="WRITE", files=1, size=1, rows=1, entries=1, timestamp=1000,
              checkpoint=False, schema=None, partition_columns=None):
    snapshot = DeltaLogSnapshot(operation, files, size, rows, entries, timestamp, checkpoint)
    if schema is not None or partition_columns is not None:
        snapshot.set_schema(schema, partition_columns)
    snapshot.set_version_id(version)
    return snapshot


class DeltaLogSnapshotTest(unittest.TestCase):

    def setUp(self):
        self.snapshot0 = _snapshot(0, operation="CREATE TABLE", files=2, size=200, rows=10, entries=2,
                                   timestamp=1000)
        self.snapshot1 = _snapshot(1, operation="DELETE", files=-1, size=-100, rows=0, entries=1,
                                   timestamp=2000)
        self.snapshot2 = _snapshot(2, operation="WRITE", files=3, size=300, rows=5, entries=3,
                                   timestamp=3000, schema="S2", partition_columns=[])

    def test_merge(self):
        snapshot00 = self.snapshot0.clone()
        snapshot00.merge(self.snapshot1)
        snapshot00.merge(self.snapshot2)

        self.assertEqual(OperationType.COMBINED, snapshot00.get_operation_type())
        self.assertEqual(4, snapshot00.get_net_files_added())
        self.assertEqual(15, snapshot00.get_net_output_rows())
        self.assertEqual(400, snapshot00.get_net_bytes_added())
        self.assertEqual(6, snapshot00.get_total_file_entries())
        self.assertEqual("S2", snapshot00.get_schema())
        self.assertEqual(3000, snapshot00.get_timestamp())
        self.assertEqual((), snapshot00.get_partition_columns())
        self.assertEqual(2, snapshot00.get_version_id())

        # Different permutations of the merge
        snapshot10 = self.snapshot1.clone()
        snapshot20 = self.snapshot2.clone()
        snapshot20.merge(self.snapshot0)
        snapshot10.merge(snapshot20)
        self.assertEqual(snapshot00, snapshot10)

    def test_merge_leaves_argument_unchanged(self):
        before = self.snapshot2.clone()
        receiver = self.snapshot0.clone()
        receiver.merge(self.snapshot2)
        self.assertEqual(before, self.snapshot2)
        self.assertNotEqual(receiver, self.snapshot0)

    def test_compare(self):
        self.assertTrue(self.snapshot0.compare_to(self.snapshot2) < 0)
        self.assertTrue(self.snapshot1.compare_to(self.snapshot2) < 0)
        self.assertTrue(self.snapshot1.compare_to(self.snapshot0) > 0)
        self.assertEqual(0, self.snapshot0.clone().compare_to(self.snapshot0))

        self.assertEqual([self.snapshot0, self.snapshot1, self.snapshot2],
                         sorted([self.snapshot2, self.snapshot0, self.snapshot1]))
        self.assertIs(self.snapshot2, max([self.snapshot1, self.snapshot2, self.snapshot0]))

    def test_compare_ignores_other_fields(self):
        other = _snapshot(0, operation="MERGE", files=7, schema="other", partition_columns=["a"])
        self.assertEqual(0, other.compare_to(self.snapshot0))
        self.assertNotEqual(other, self.snapshot0)

    def test_merge_on_version(self):
        snapshot1 = _snapshot(11, schema="schema1", partition_columns=[])
        snapshot2 = _snapshot(10, checkpoint=True, schema="schema2", partition_columns=[])

        snapshot1.merge(snapshot2)
        self.assertEqual("schema1", snapshot1.get_schema())
        self.assertTrue(snapshot1.is_checkpoint())

    def test_merge_keeps_schema_of_data_only_commit(self):
        with_schema = _snapshot(11, timestamp=11, schema="S1", partition_columns=[])
        without_schema = _snapshot(10, timestamp=10)

        forward = with_schema.clone().merge(without_schema)
        backward = without_schema.clone().merge(with_schema)
        self.assertEqual("S1", forward.get_schema())
        self.assertEqual("S1", backward.get_schema())
        self.assertEqual(11, forward.get_timestamp())
        self.assertEqual(forward, backward)

    def test_merge_newer_without_schema_keeps_older_metadata(self):
        older = _snapshot(3, timestamp=3, schema="S3", partition_columns=["colA"])
        newer = _snapshot(4, timestamp=4)

        merged = newer.clone().merge(older)
        self.assertEqual("S3", merged.get_schema())
        self.assertEqual(("colA",), merged.get_partition_columns())
        self.assertEqual(3, merged.get_timestamp())
        self.assertEqual(4, merged.get_version_id())

    def test_schema_recorded_after_version_is_newest(self):
        merged = _snapshot(5, timestamp=5).merge(_snapshot(2, timestamp=2, schema="S2", partition_columns=[]))
        self.assertEqual(2, merged.metadata_version)

        merged.set_schema("S5", [])
        self.assertEqual(5, merged.metadata_version)

        middle = _snapshot(3, timestamp=3, schema="S3", partition_columns=[])
        self.assertEqual("S5", merged.clone().merge(middle).get_schema())
        self.assertEqual("S5", middle.clone().merge(merged).get_schema())

    def test_merge_repartition(self):
        snapshot1 = _snapshot(11, schema="schema1", partition_columns=["colA"])
        snapshot2 = _snapshot(10, checkpoint=True, schema="schema2", partition_columns=["colB"])

        with self.assertRaises(UnsupportedRepartitionException) as context:
            snapshot1.merge(snapshot2)
        self.assertEqual(("colB",), context.exception.previous_partition_columns)
        self.assertEqual(("colA",), context.exception.new_partition_columns)

    def test_merge_partition_introduced(self):
        snapshot1 = _snapshot(11, schema="schema1", partition_columns=["colA"])
        snapshot2 = _snapshot(10, checkpoint=True, schema="schema2", partition_columns=[])

        with self.assertRaises(UnsupportedRepartitionException):
            snapshot1.merge(snapshot2)
        with self.assertRaises(UnsupportedRepartitionException):
            snapshot2.clone().merge(snapshot1)

    def test_merge_partition_reordered(self):
        snapshot1 = _snapshot(11, schema="schema1", partition_columns=["colA", "colB"])
        snapshot2 = _snapshot(10, schema="schema2", partition_columns=["colB", "colA"])

        with self.assertRaises(UnsupportedRepartitionException):
            snapshot1.merge(snapshot2)

    def test_failed_merge_leaves_receiver_unchanged(self):
        snapshot1 = _snapshot(11, schema="schema1", partition_columns=["colA"])
        snapshot2 = _snapshot(10, schema="schema2", partition_columns=["colB"])
        before = snapshot1.clone()

        with self.assertRaises(UnsupportedRepartitionException):
            snapshot1.merge(snapshot2)
        self.assertEqual(before, snapshot1)

    def test_merge_repartition_no_metadata(self):
        snapshot1 = _snapshot(11, schema="schema1", partition_columns=["colA"])
        snapshot2 = _snapshot(10, checkpoint=True)

        snapshot1.merge(snapshot2)
        self.assertEqual(("colA",), snapshot1.get_partition_columns())

    def test_merge_repartition_no_metadata_both_sides(self):
        snapshot1 = _snapshot(11)
        snapshot2 = _snapshot(10, checkpoint=True)

        snapshot1.merge(snapshot2)
        self.assertIsNone(snapshot1.get_schema())
        self.assertIsNone(snapshot1.get_partition_columns())

    def test_merge_with_partitions(self):
        snapshot1 = _snapshot(11, schema="schema1", partition_columns=["colA"])
        snapshot2 = _snapshot(10, checkpoint=True, schema="schema2", partition_columns=("colA",))

        snapshot1.merge(snapshot2)
        self.assertEqual("schema1", snapshot1.get_schema())
        self.assertEqual(("colA",), snapshot1.get_partition_columns())

    def test_absent_and_empty_partitions_are_not_equal(self):
        unrecorded = _snapshot(5)
        unpartitioned = _snapshot(5, schema="S", partition_columns=[])
        partitioned = _snapshot(5, schema="S", partition_columns=["colA"])
        self.assertIsNone(unrecorded.get_partition_columns())
        self.assertFalse(unrecorded.has_metadata())
        self.assertEqual((), unpartitioned.get_partition_columns())
        self.assertNotEqual(unrecorded, unpartitioned)
        self.assertNotEqual(unpartitioned, partitioned)

    def test_schema_and_partitions_are_recorded_together(self):
        snapshot = DeltaLogSnapshot("WRITE", 1, 1, 1, 1, 1000)
        with self.assertRaises(ValueError):
            snapshot.set_schema("S", None)
        with self.assertRaises(ValueError):
            snapshot.set_schema(None, ["colA"])
        snapshot.set_schema("S", ["colA"])
        self.assertTrue(snapshot.has_metadata())

    def test_clone_is_independent(self):
        original = _snapshot(1, schema={"type": "struct", "fields": []}, partition_columns=["colA"])
        clone = original.clone()
        self.assertEqual(original, clone)
        self.assertIsNot(original.get_schema(), clone.get_schema())

        clone.get_schema()["fields"].append({"name": "x"})
        self.assertEqual([], original.get_schema()["fields"])

        clone.merge(_snapshot(2))
        self.assertEqual(1, original.get_version_id())
        self.assertEqual(1, original.get_net_files_added())

    def test_version_is_set_once(self):
        snapshot = DeltaLogSnapshot("WRITE", 1, 1, 1, 1, 1000)
        self.assertIsNone(snapshot.get_version_id())
        snapshot.set_version_id(3)
        with self.assertRaises(ValueError):
            snapshot.set_version_id(4)
        self.assertEqual(3, snapshot.get_version_id())

    def test_invalid_construction(self):
        with self.assertRaises(ValueError):
            DeltaLogSnapshot("WRITE", 1, 1, 1, 1, 1000).set_version_id(-1)
        with self.assertRaises(ValueError):
            DeltaLogSnapshot("WRITE", "1", 1, 1, 1, 1000)
        with self.assertRaises(ValueError):
            DeltaLogSnapshot("NOT AN OPERATION", 1, 1, 1, 1, 1000)
        with self.assertRaises(ValueError):
            DeltaLogSnapshot("WRITE", 1, 1, 1, 1, 1000, partition_columns="colA")

    def test_merge_requires_versions(self):
        unversioned = DeltaLogSnapshot("WRITE", 1, 1, 1, 1, 1000)
        with self.assertRaises(ValueError):
            self.snapshot0.clone().merge(unversioned)
        with self.assertRaises(ValueError):
            unversioned.compare_to(self.snapshot0)

    def test_arrow_schema(self):
        self.assertIsNone(self.snapshot0.get_arrow_schema())

        snapshot = _snapshot(4, schema=SCHEMA_STRING, partition_columns=[])
        expected = pyarrow.schema([pyarrow.field("id", pyarrow.int64()),
                                   pyarrow.field("name", pyarrow.string())])
        self.assertTrue(expected.equals(snapshot.get_arrow_schema()))

    def test_pyarrow_schema_value(self):
        schema = pyarrow.schema([pyarrow.field("id", pyarrow.int64())])
        older = _snapshot(1, schema=schema, partition_columns=[])
        newer = _snapshot(2)

        merged = newer.clone().merge(older)
        self.assertTrue(schema.equals(merged.get_schema()))
        self.assertEqual(merged, older.clone().merge(newer))
        self.assertTrue(schema.equals(merged.get_arrow_schema()))


if __name__ == '__main__':
    unittest.main()
