"""Structs shared by the test modules."""

from structclass import Factory, Field, Struct, validators


class Address(Struct):
    street = Field(validators=[validators.not_null])
    city = Field(validators=[validators.not_blank])


class Person(Struct):
    name = Field(validators=[validators.not_null])
    age = Field(default=0, validators=[validators.gte(0)])
    address = Field()
    friends = Field(default=Factory(list))


class Employee(Person):
    employer = Field(validators=[validators.optional(validators.min_len(2))])


class Point(Struct, hash=True, getitem=True, setitem=True):
    x = Field(default=0)
    y = Field(default=0)


class Empty(Struct):
    pass
