"""Base repository with common CRUD operations"""
import logging
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar, Union

import httpx
from pydantic import BaseModel
from supabase import Client, PostgrestAPIError

from app.core.exceptions import NetworkFailure, UnknownFailure

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=BaseModel)
CreateT = TypeVar('CreateT', bound=BaseModel)
UpdateT = TypeVar('UpdateT', bound=BaseModel)


class BaseRepository(Generic[T, CreateT, UpdateT]):
    """
    Base repository providing common document store operations.
    Hides Supabase implementation details from the rest of the application.

    Array fields (members, comments, history) are stored as JSON arrays and
    updated read-modify-write: the last writer wins on the whole array.
    """

    def __init__(self, client: Client, table_name: str, model_class: Type[T], id_column: str = "id"):
        self._client = client
        self._table_name = table_name
        self._model_class = model_class
        self._id_column = id_column

    def _to_model(self, data: Dict[str, Any]) -> T:
        """Convert database dict to domain model"""
        return self._model_class(**data)

    def _to_models(self, data: List[Dict[str, Any]]) -> List[T]:
        """Convert list of database dicts to domain models"""
        return [self._to_model(item) for item in data]

    def _execute(self, query):
        """Run a query, translating transport and API failures"""
        try:
            return query.execute()
        except httpx.HTTPError as e:
            logger.error(f"Document store unreachable ({self._table_name}): {e}")
            raise NetworkFailure()
        except PostgrestAPIError as e:
            logger.error(f"Document store rejected request ({self._table_name}): {e}")
            raise UnknownFailure()

    @staticmethod
    def _dump(data: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
        if isinstance(data, BaseModel):
            return data.model_dump(exclude_unset=True, mode='json')
        return data

    async def find_by_id(self, id: str) -> Optional[T]:
        """Find a single record by ID"""
        query = self._client.table(self._table_name).select("*").eq(self._id_column, id)
        response = self._execute(query)

        if not response.data:
            return None

        return self._to_model(response.data[0])

    async def find_by_filters(
        self,
        filters: Dict[str, Any],
        order_by: Optional[str] = None,
        desc: bool = False,
        limit: Optional[int] = None,
    ) -> List[T]:
        """Find records matching equality filters"""
        query = self._client.table(self._table_name).select("*")

        for key, value in filters.items():
            query = query.eq(key, value)

        if order_by:
            query = query.order(order_by, desc=desc)

        if limit:
            query = query.limit(limit)

        response = self._execute(query)
        return self._to_models(response.data)

    async def find_one_by_filters(self, filters: Dict[str, Any]) -> Optional[T]:
        results = await self.find_by_filters(filters, limit=1)
        return results[0] if results else None

    async def create(self, data: CreateT) -> T:
        """Create a new record"""
        data_dict = data.model_dump(mode='json')
        response = self._execute(self._client.table(self._table_name).insert(data_dict))

        if not response.data:
            raise UnknownFailure("Failed to create record")

        return self._to_model(response.data[0])

    async def update(self, id: str, data: Union[UpdateT, Dict[str, Any]]) -> Optional[T]:
        """Set fields on a record by ID"""
        data_dict = self._dump(data)

        if not data_dict:
            # No fields to update
            return await self.find_by_id(id)

        query = self._client.table(self._table_name).update(data_dict).eq(self._id_column, id)
        response = self._execute(query)

        if not response.data:
            return None

        return self._to_model(response.data[0])

    async def append_to_array(self, id: str, field: str, item: BaseModel) -> Optional[T]:
        """Append an item to an array field"""
        record = await self.find_by_id(id)
        if record is None:
            return None

        items = [i.model_dump(mode='json') for i in getattr(record, field)]
        items.append(item.model_dump(mode='json'))
        return await self.update(id, {field: items})

    async def remove_from_array(self, id: str, field: str, predicate: Callable[[Any], bool]) -> Optional[T]:
        """Remove every item matching predicate from an array field"""
        record = await self.find_by_id(id)
        if record is None:
            return None

        items = [i.model_dump(mode='json') for i in getattr(record, field) if not predicate(i)]
        return await self.update(id, {field: items})

    async def delete(self, id: str) -> bool:
        """Delete a record by ID"""
        query = self._client.table(self._table_name).delete().eq(self._id_column, id)
        response = self._execute(query)
        return len(response.data) > 0
