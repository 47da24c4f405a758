import copy
import pickle

import pytest

from structclass import Field, Struct, UndeclaredFieldError

from tests.structs import Address, Employee, Empty, Person, Point


class TestFieldGuard:
    def test_undeclared_read_fails(self, person: Person):
        with pytest.raises(UndeclaredFieldError) as exc_info:
            person.nickname

        assert exc_info.value.struct_type == "Person"
        assert exc_info.value.field_name == "nickname"
        assert str(exc_info.value) == "Non-existent property nickname get in Person"

    def test_undeclared_write_fails_and_creates_nothing(self, person: Person):
        with pytest.raises(UndeclaredFieldError) as exc_info:
            person.nickname = "Countess"

        assert str(exc_info.value) == "Non-existent property nickname set in Person"
        assert "nickname" not in vars(person)
        assert "nickname" not in person.to_dict()

    def test_undeclared_delete_fails(self, person: Person):
        with pytest.raises(UndeclaredFieldError):
            del person.nickname

    def test_undeclared_field_error_is_an_attribute_error(self, person: Person):
        assert not hasattr(person, "nickname")
        assert getattr(person, "nickname", "fallback") == "fallback"

    @pytest.mark.parametrize("name", ["name", "age", "address", "friends"])
    def test_declared_fields_can_be_read_and_written(self, name: str):
        person = Person()
        setattr(person, name, "value")
        assert getattr(person, name) == "value"

    def test_methods_and_class_attributes_are_readable(self, person: Person):
        class Tagged(Struct):
            KIND = "tagged"
            label = Field()

        tagged = Tagged(label="x")
        assert tagged.KIND == "tagged"
        assert callable(person.validate)
        with pytest.raises(UndeclaredFieldError):
            tagged.KIND = "other"

    def test_deleting_a_field_restores_its_default(self):
        person = Person(age=40)
        del person.age
        assert person.age == 0


class TestDeclaration:
    def test_fields_keep_declaration_order(self):
        assert list(Person.__fields__) == ["name", "age", "address", "friends"]

    def test_inherited_fields_come_first(self):
        assert list(Employee.__fields__) == [
            "name",
            "age",
            "address",
            "friends",
            "employer",
        ]

    def test_fields_mapping_is_read_only(self):
        with pytest.raises(TypeError):
            Person.__fields__["extra"] = Field()  # type: ignore[index]

    def test_struct_without_fields(self):
        empty = Empty()
        assert empty.to_dict() == {}
        with pytest.raises(UndeclaredFieldError):
            empty.anything = 1

    def test_class_access_returns_the_field(self):
        assert isinstance(Person.name, Field)
        assert Person.name.name == "name"


class TestInitialization:
    def test_defaults(self):
        person = Person()
        assert person.name is None
        assert person.age == 0
        assert person.address is None
        assert person.friends == []

    def test_factory_defaults_are_not_shared(self):
        first, second = Person(), Person()
        first.friends.append("Grace")
        assert second.friends == []

    def test_keyword_values(self, address: Address):
        person = Person(name="Ada", address=address)
        assert person.name == "Ada"
        assert person.address is address

    def test_unknown_keyword_fails(self):
        with pytest.raises(UndeclaredFieldError):
            Person(name="Ada", nickname="Countess")

    def test_values_are_not_coerced(self):
        assert Person(age="36").age == "36"


class TestDunders:
    def test_equality_compares_field_values(self, address: Address):
        assert Person(name="Ada", address=address) == Person(
            name="Ada", address=Address(street=address.street, city=address.city)
        )
        assert Person(name="Ada") != Person(name="Grace")
        assert Person(name="Ada") != Address()

    def test_structs_are_unhashable_by_default(self):
        with pytest.raises(TypeError):
            hash(Person())

    def test_hash_option(self):
        assert hash(Point(x=1, y=2)) == hash(Point(x=1, y=2))
        assert len({Point(x=1, y=2), Point(x=1, y=2)}) == 1

    def test_repr(self):
        assert repr(Address(street="Elm", city="Paris")) == (
            "Address(street='Elm', city='Paris')"
        )

    def test_item_access_option(self):
        point = Point(x=1)
        point["y"] = 5
        assert point["x"] == 1
        assert point.y == 5

        with pytest.raises(UndeclaredFieldError):
            point["z"]
        with pytest.raises(UndeclaredFieldError):
            point["z"] = 3

    def test_hash_option_is_inherited(self):
        class Point3(Point):
            z = Field(default=0)

        assert hash(Point3(x=1, z=2)) == hash(Point3(x=1, z=2))
        assert Point3(x=1) in {Point3(x=1)}

    def test_inherited_hash_can_be_turned_off(self):
        class MutablePoint(Point, hash=False):
            pass

        with pytest.raises(TypeError):
            hash(MutablePoint())


class TestUndeclaredFieldError:
    def test_pickles(self, person: Person):
        with pytest.raises(UndeclaredFieldError) as exc_info:
            person.nickname

        restored = pickle.loads(pickle.dumps(exc_info.value))
        assert isinstance(restored, UndeclaredFieldError)
        assert restored.struct_type == "Person"
        assert restored.field_name == "nickname"
        assert restored.action == "get"
        assert str(restored) == "Non-existent property nickname get in Person"

    def test_copies(self):
        error = UndeclaredFieldError("Person", "nickname", "set")
        duplicate = copy.copy(error)
        assert duplicate.args == ("Person", "nickname", "set")
        assert str(duplicate) == "Non-existent property nickname set in Person"

    def test_attribute_error_inside_a_property_is_reported_for_the_property(self):
        class Label(Struct):
            text = Field()

            @property
            def upper(self):
                return self.text.missing

        with pytest.raises(UndeclaredFieldError) as exc_info:
            Label(text="a").upper

        assert exc_info.value.field_name == "upper"
