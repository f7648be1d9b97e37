from beanwire.configuration import BeanMethodProxy, bean, configuration
from beanwire.container import Container
from beanwire.exceptions import (
    BeanwireAmbiguousBeanError,
    BeanwireBeanNotRegisteredError,
    BeanwireCircularDependencyError,
    BeanwireError,
    BeanwireInvalidRegistrationError,
)
from beanwire.providers import Lifetime

__all__ = [
    "BeanMethodProxy",
    "BeanwireAmbiguousBeanError",
    "BeanwireBeanNotRegisteredError",
    "BeanwireCircularDependencyError",
    "BeanwireError",
    "BeanwireInvalidRegistrationError",
    "Container",
    "Lifetime",
    "bean",
    "configuration",
]
