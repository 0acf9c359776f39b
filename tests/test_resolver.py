"""
Unit tests for identifier resolution.

Strategy order per kind:
- period: id | code, season+year, partial name
- program: id | code, full name, partial name, search tokens
- course/group: parsed number, then fallbacks
"""

import unittest

from rtu_schedule.errors import (
    CourseNotFoundError,
    GroupNotFoundError,
    PeriodNotFoundError,
    ProgramNotFoundError,
)
from rtu_schedule.models import CourseRecord, GroupRecord
from rtu_schedule.resolver import Resolver, first_match, to_study_course, to_study_group

from tests.helpers import FakeApi, FakeDiscovery


class TestFirstMatch(unittest.TestCase):
    def test_strategy_order_beats_item_order(self) -> None:
        items = ["alpha", "beta"]
        strategies = [
            ("none", lambda s: False),
            ("second", lambda s: s == "beta"),
            ("first", lambda s: s == "alpha"),
        ]
        self.assertEqual(first_match(items, strategies, kind="test"), "beta")

    def test_no_match(self) -> None:
        self.assertIsNone(first_match([1, 2], [("never", lambda i: False)], kind="test"))


class TestResolvePeriod(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.resolver = Resolver(FakeDiscovery(), FakeApi())

    async def test_by_id(self) -> None:
        self.assertEqual((await self.resolver.resolve_period(1)).id, 1)
        self.assertEqual((await self.resolver.resolve_period(3)).id, 3)

    async def test_by_code_case_insensitive(self) -> None:
        self.assertEqual((await self.resolver.resolve_period("25/26-p")).id, 2)
        self.assertEqual((await self.resolver.resolve_period("24/25-V")).id, 3)

    async def test_by_season_and_year(self) -> None:
        self.assertEqual((await self.resolver.resolve_period("Pavasaris 2025/2026")).id, 2)
        self.assertEqual((await self.resolver.resolve_period("autumn 2025")).id, 1)
        self.assertEqual((await self.resolver.resolve_period("summer")).id, 3)

    async def test_by_partial_name(self) -> None:
        self.assertEqual((await self.resolver.resolve_period("Vasaras semestris")).id, 3)

    async def test_numeric_string_is_not_an_id(self) -> None:
        # "2" is a substring of every name, so the first period wins
        self.assertEqual((await self.resolver.resolve_period("2")).id, 1)

    async def test_unknown_period(self) -> None:
        with self.assertRaises(PeriodNotFoundError) as ctx:
            await self.resolver.resolve_period(999)
        self.assertEqual(ctx.exception.input, 999)
        self.assertEqual(str(ctx.exception), 'Study period not found: "999"')

        with self.assertRaises(PeriodNotFoundError):
            await self.resolver.resolve_period("ziema 2030")

    async def test_blank_text_matches_nothing(self) -> None:
        for query in ("", "   "):
            with self.assertRaises(PeriodNotFoundError):
                await self.resolver.resolve_period(query)


class TestResolveProgram(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.discovery = FakeDiscovery()
        self.resolver = Resolver(self.discovery, FakeApi())

    async def test_by_id(self) -> None:
        program = await self.resolver.resolve_program(101, 1)
        self.assertEqual(program.code, "RITI0")
        self.assertEqual(self.discovery.program_calls, [1])

    async def test_by_code(self) -> None:
        self.assertEqual((await self.resolver.resolve_program("rdbd0", 1)).id, 100)

    async def test_by_full_name_without_diacritics(self) -> None:
        self.assertEqual((await self.resolver.resolve_program("informacijas tehnologija", 1)).id, 101)
        self.assertEqual((await self.resolver.resolve_program("Elektronika (RELE0)", 1)).id, 102)

    async def test_by_partial_name(self) -> None:
        self.assertEqual((await self.resolver.resolve_program("Datorsist", 1)).id, 100)

    async def test_by_tokens(self) -> None:
        self.assertEqual((await self.resolver.resolve_program("electronics", 1)).id, 102)

    async def test_unknown_program(self) -> None:
        with self.assertRaises(ProgramNotFoundError) as ctx:
            await self.resolver.resolve_program("Medicīna", 1)
        self.assertEqual(ctx.exception.input, "Medicīna")

        with self.assertRaises(ProgramNotFoundError):
            await self.resolver.resolve_program(5, 1)

    async def test_blank_text_matches_nothing(self) -> None:
        with self.assertRaises(ProgramNotFoundError):
            await self.resolver.resolve_program("", 1)
        with self.assertRaises(ProgramNotFoundError):
            await self.resolver.resolve_program("  ", 1)


class TestResolveCourseAndGroup(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.api = FakeApi()
        self.resolver = Resolver(FakeDiscovery(), self.api)

    async def test_course_by_number(self) -> None:
        course = await self.resolver.resolve_course(2, 1, 100)
        self.assertEqual((course.id, course.number, course.name), (1002, 2, "2. kurss"))
        self.assertEqual(self.api.course_calls, [(1, 100)])

    async def test_course_by_semester_field(self) -> None:
        self.api.courses = [CourseRecord(id=7, name="Bakalaurs", semester=4)]
        course = await self.resolver.resolve_course(4, 1, 100)
        self.assertEqual((course.id, course.number), (7, 4))

    async def test_course_from_bare_numbers(self) -> None:
        self.api.courses = [CourseRecord.model_validate(n) for n in (1, 2, 3)]
        course = await self.resolver.resolve_course(3, 1, 100)
        self.assertEqual((course.id, course.number, course.name), (3, 3, "3. kurss"))

    async def test_course_not_found(self) -> None:
        with self.assertRaises(CourseNotFoundError) as ctx:
            await self.resolver.resolve_course(6, 1, 100)
        self.assertEqual(ctx.exception.course_number, 6)
        self.assertEqual(str(ctx.exception), "Course 6 not found")

    async def test_group_by_number(self) -> None:
        group = await self.resolver.resolve_group(2, 1, 100, 1001)
        self.assertEqual(group.id, 2002)
        self.assertEqual(group.number, 2)
        self.assertEqual(group.semester_program_id, 2002)
        self.assertEqual(group.student_count, 30)
        self.assertEqual(self.api.group_calls, [(1001, 1, 100)])

    async def test_group_by_code_number(self) -> None:
        group = await self.resolver.resolve_group(13, 1, 100, 1001)
        self.assertEqual((group.id, group.name), (2003, "DBI-13"))

    async def test_group_not_found(self) -> None:
        with self.assertRaises(GroupNotFoundError) as ctx:
            await self.resolver.resolve_group(9, 1, 100, 1001)
        self.assertEqual(ctx.exception.group_number, 9)

    async def test_listings(self) -> None:
        courses = await self.resolver.get_courses(1, 100)
        self.assertEqual([c.number for c in courses], [1, 2, 3])
        groups = await self.resolver.get_groups(1, 100, 1001)
        self.assertEqual([g.number for g in groups], [1, 2, 13])


class TestRecordTransforms(unittest.TestCase):
    def test_course_number_fallbacks(self) -> None:
        self.assertEqual(to_study_course(CourseRecord(id=1, name="Kurss", semester=2)).number, 2)
        self.assertEqual(to_study_course(CourseRecord(id=1, name="Kurss"), 5).number, 5)

    def test_group_from_semester_program_shape(self) -> None:
        record = GroupRecord.model_validate({"semesterProgramId": 27317, "group": "13", "course": 1})
        group = to_study_group(record)
        self.assertEqual((group.id, group.number, group.semester_program_id), (27317, 13, 27317))


if __name__ == "__main__":
    unittest.main()
