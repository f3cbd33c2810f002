"""
MongoDB access for tests, questions and admins.

Route handlers never touch collections directly; they receive a
TestStore bound to the shared database handle.
"""

import logging
from typing import List, Optional

from bson import ObjectId
from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..config import settings
from ..errors import DuplicateTest, PersistenceFailure
from ..utils.database import ADMINS, QUESTIONS, TESTS, get_database

logger = logging.getLogger(__name__)


class TestStore:
    def __init__(self, db: AsyncIOMotorDatabase, use_transactions: bool = None):
        self.db = db
        if use_transactions is None:
            use_transactions = settings.MONGODB_USE_TRANSACTIONS
        self.use_transactions = use_transactions

    @property
    def tests(self):
        return self.db[TESTS]

    @property
    def questions(self):
        return self.db[QUESTIONS]

    @property
    def admins(self):
        return self.db[ADMINS]

    # Tests

    async def find_test_by_key(self, date: str, test_type: str, phase: str) -> Optional[dict]:
        try:
            return await self.tests.find_one({"date": date, "testType": test_type, "phase": phase})
        except PyMongoError as e:
            logger.error(f"Error looking up test for {date}/{test_type}/{phase}: {str(e)}")
            raise PersistenceFailure("Error checking for an existing test")

    async def get_test(self, test_id: ObjectId) -> Optional[dict]:
        try:
            return await self.tests.find_one({"_id": test_id})
        except PyMongoError as e:
            logger.error(f"Error fetching test {test_id}: {str(e)}")
            raise PersistenceFailure("Error fetching test")

    async def list_tests(self) -> List[dict]:
        try:
            cursor = self.tests.find({}).sort([("date", DESCENDING), ("phase", ASCENDING)])
            return await cursor.to_list(None)
        except PyMongoError as e:
            logger.error(f"Error listing tests: {str(e)}")
            raise PersistenceFailure("Error fetching tests")

    async def create_test_with_questions(self, test_doc: dict, question_docs: List[dict]):
        """
        Write a test and its questions so that either both are visible or
        neither is.
        """
        try:
            if self.use_transactions:
                await self._insert_in_transaction(test_doc, question_docs)
            else:
                await self._insert_with_compensation(test_doc, question_docs)
        except DuplicateKeyError:
            logger.warning(
                f"Duplicate test rejected by index: {test_doc['date']}/"
                f"{test_doc['testType']}/{test_doc['phase']}"
            )
            raise DuplicateTest()
        except PyMongoError as e:
            logger.error(f"Error creating test {test_doc['_id']}: {str(e)}")
            raise PersistenceFailure("Error creating test")

    async def _insert_in_transaction(self, test_doc: dict, question_docs: List[dict]):
        async with await self.db.client.start_session() as session:
            async with session.start_transaction():
                await self.tests.insert_one(test_doc, session=session)
                await self._insert_questions(question_docs, session=session)

    async def _insert_with_compensation(self, test_doc: dict, question_docs: List[dict]):
        await self.tests.insert_one(test_doc)
        try:
            await self._insert_questions(question_docs)
        except PyMongoError:
            logger.error(f"Question batch failed for test {test_doc['_id']}, removing the test")
            await self.questions.delete_many({"testId": test_doc["_id"]})
            await self.tests.delete_one({"_id": test_doc["_id"]})
            raise

    async def _insert_questions(self, question_docs: List[dict], session=None):
        if question_docs:
            await self.questions.insert_many(question_docs, ordered=True, session=session)

    async def delete_test_cascade(self, test_id: ObjectId) -> bool:
        """
        Remove a test and every question that belongs to it. Returns False
        when the test does not exist.
        """
        try:
            if await self.tests.find_one({"_id": test_id}, {"_id": 1}) is None:
                return False
            removed = await self.questions.delete_many({"testId": test_id})
            result = await self.tests.delete_one({"_id": test_id})
        except PyMongoError as e:
            logger.error(f"Error deleting test {test_id}: {str(e)}")
            raise PersistenceFailure("Error deleting test")

        logger.info(f"Deleted test {test_id} and {removed.deleted_count} questions")
        return result.deleted_count > 0

    # Questions

    async def list_questions(self, test_id: ObjectId) -> List[dict]:
        try:
            cursor = self.questions.find({"testId": test_id}).sort("questionNumber", ASCENDING)
            return await cursor.to_list(None)
        except PyMongoError as e:
            logger.error(f"Error listing questions for test {test_id}: {str(e)}")
            raise PersistenceFailure("Error fetching questions")

    async def delete_question(self, question_id: ObjectId) -> bool:
        try:
            question = await self.questions.find_one({"_id": question_id}, {"testId": 1})
            if question is None:
                return False
            result = await self.questions.delete_one({"_id": question_id})
            if result.deleted_count == 0:
                return False
            await self.tests.update_one(
                {"_id": question["testId"]},
                {"$inc": {"totalQuestions": -1}},
            )
        except PyMongoError as e:
            logger.error(f"Error deleting question {question_id}: {str(e)}")
            raise PersistenceFailure("Error deleting question")

        logger.info(f"Deleted question {question_id} from test {question['testId']}")
        return True

    # Admins

    async def find_admin_by_email(self, email: str) -> Optional[dict]:
        try:
            return await self.admins.find_one({"email": email})
        except PyMongoError as e:
            logger.error(f"Error fetching admin: {str(e)}")
            raise PersistenceFailure("Error fetching admin")

    async def create_admin(self, admin_doc: dict) -> Optional[ObjectId]:
        """
        Insert an admin. Returns None when the email is already taken.
        """
        try:
            result = await self.admins.insert_one(admin_doc)
        except DuplicateKeyError:
            return None
        except PyMongoError as e:
            logger.error(f"Error creating admin: {str(e)}")
            raise PersistenceFailure("Error creating admin")
        return result.inserted_id


async def get_store(db: AsyncIOMotorDatabase = Depends(get_database)) -> TestStore:
    return TestStore(db)
