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

import json
import re
from typing import Any, Dict, Union

import pyarrow


class DeltaSchemaParser:
    """Converts the ``schemaString`` of a delta metadata action to a pyarrow schema."""

    _PRIMITIVES = {
        'string': pyarrow.string(),
        'long': pyarrow.int64(),
        'integer': pyarrow.int32(),
        'short': pyarrow.int16(),
        'byte': pyarrow.int8(),
        'float': pyarrow.float32(),
        'double': pyarrow.float64(),
        'boolean': pyarrow.bool_(),
        'binary': pyarrow.binary(),
        'date': pyarrow.date32(),
        'timestamp': pyarrow.timestamp('us', tz='UTC'),
        'timestamp_ntz': pyarrow.timestamp('us', tz=None),
    }

    @staticmethod
    def to_pyarrow_schema(schema: Union[str, Dict[str, Any], pyarrow.Schema]) -> pyarrow.Schema:
        if isinstance(schema, pyarrow.Schema):
            return schema
        if isinstance(schema, str):
            try:
                schema = json.loads(schema)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid delta schema JSON: {schema}") from e
        if not isinstance(schema, dict) or schema.get('type') != 'struct':
            raise ValueError(f"Delta schema must be a struct type, got {schema!r}")
        return pyarrow.schema([DeltaSchemaParser.to_pyarrow_field(f) for f in schema.get('fields', [])])

    @staticmethod
    def to_pyarrow_field(field: Dict[str, Any]) -> pyarrow.Field:
        metadata = field.get('metadata') or None
        if metadata:
            metadata = {str(k): json.dumps(v) if not isinstance(v, str) else v for k, v in metadata.items()}
        return pyarrow.field(field['name'],
                             DeltaSchemaParser.to_pyarrow_type(field['type']),
                             nullable=field.get('nullable', True),
                             metadata=metadata)

    @staticmethod
    def to_pyarrow_type(data_type: Union[str, Dict[str, Any]]) -> pyarrow.DataType:
        if isinstance(data_type, str):
            primitive = DeltaSchemaParser._PRIMITIVES.get(data_type)
            if primitive is not None:
                return primitive
            match = re.fullmatch(r'decimal\((\d+),\s*(\d+)\)', data_type)
            if match:
                precision, scale = map(int, match.groups())
                return pyarrow.decimal128(precision, scale)
            raise ValueError(f"Unsupported delta type: {data_type}")

        type_name = data_type.get('type')
        if type_name == 'struct':
            return pyarrow.struct([DeltaSchemaParser.to_pyarrow_field(f) for f in data_type.get('fields', [])])
        elif type_name == 'array':
            element = pyarrow.field('element',
                                    DeltaSchemaParser.to_pyarrow_type(data_type['elementType']),
                                    nullable=data_type.get('containsNull', True))
            return pyarrow.list_(element)
        elif type_name == 'map':
            key_type = DeltaSchemaParser.to_pyarrow_type(data_type['keyType'])
            value_type = DeltaSchemaParser.to_pyarrow_type(data_type['valueType'])
            return pyarrow.map_(key_type, value_type)
        raise ValueError(f"Unsupported delta type: {data_type}")
