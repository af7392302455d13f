"""
Annotation classes and documented objects used by the reader tests.
"""

MAX_RETRIES = 3


class FooAnnotation:
    """
    @Annotation
    @DefaultAttribute value
    @Attribute('value', type: 'string')
    @Attribute('named', type: 'string')
    @Attribute('enum', type: @Enum({'foo', 'bar'}))
    @Attribute('array', type: {'string', 'int'})
    @Attribute('retries', type: 'int')
    @Target({'class', 'method', 'property'})
    """
    BAR = "bar"


class ConstructorAnnotation:
    """
    @Annotation
    @Attribute('label', type: 'string')
    @Attribute('count', type: 'int', default: 8)
    """

    def __init__(self, count=5, label="default"):
        self.count = count
        self.label = label


class RequiredAnnotation:
    """
    @Annotation
    @Attribute('first', required: true)
    @Attribute('second', required: true)
    @Attribute('third')
    """


class Route:
    """
    HTTP route of a handler.

    @Annotation
    @DefaultAttribute path
    @Attribute('path', type: 'string', required: true)
    @Attribute('methods', type: {'string'})
    @Attribute('mode', type: @Enum({'sync', 'async'}))
    @Target({'method', 'function'})
    """

    def __init__(self):
        self.methods = ["GET"]
        self.mode = "sync"


class InheritedAnnotation(FooAnnotation):
    """
    @Annotation
    @Attribute('extra', type: 'int')
    """


class PlainBase:
    """Not an annotation type."""

    def __init__(self, label="base"):
        self.label = label


class DerivedAnnotation(PlainBase):
    """
    @Annotation
    @Attribute('label', type: 'string')
    @Target method
    """


class Tagged:
    """
    @Annotation
    @DefaultAttribute tags
    @Attribute('tags', type: {'string'}, setter: 'set_tags')
    @Attribute('note', type: 'string', nullable: true)
    @Attribute('owner', type: FooAnnotation)
    """

    def __init__(self):
        self.tags = []

    def set_tags(self, tags):
        self.tags = sorted(tags)


class BrokenSetter:
    """
    @Annotation
    @Attribute('value', setter: 'missing_method')
    """


class SelfReferencing:
    """
    @Annotation
    @SelfReferencing()
    """


class NotAnnotation:
    """A regular class."""


class Service:
    """
    User service.

    @see docs
    @FooAnnotation('foo', named: 'foobar', enum: 'bar', array: {'string', 2})
    @ConstructorAnnotation(label: 'something')
    """

    @property
    def name(self):
        """
        Service name.

        @FooAnnotation(value: FooAnnotation::BAR, retries: MAX_RETRIES)
        """
        return "users"

    @property
    def plain(self):
        return "plain"

    def list_users(self):
        """
        Lists users.

        @Route('/users', methods: {'GET', 'POST'}, mode: 'async')
        @cached 60
        """

    def helper(self):
        """No annotations here."""


class Misplaced:
    """
    @Route('/nowhere')
    """


def create_user(name):
    """
    Creates a user.

    @Route('/users/create', methods: {'POST'})
    """
    return name


class Foo:
    """Registered explicitly by the tests."""


class Point:
    """Registered explicitly with a constructor."""

    def __init__(self, x, y=0):
        self.x = x
        self.y = y


class CycleA:
    pass


class CycleB:
    pass
