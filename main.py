import sys

from rich.pretty import pprint

from optarg import *

registry = Registry(
    usage="[<values to print>...]",
    banner="This is an example app for the optarg package. "
           "The banner is a short summary which appears at the top of --help output",
    epilog="This is a tail banner that appears below the list of options",
    version="0.1.0",
)
simple = registry.register(Option.from_syntax("-o", "--opt", "A simple option"))
optional = registry.register(Option.from_syntax("-a", "--opt-with-arg [ARG]", "An option taking an optional argument"))
long_only = registry.register(Option.from_syntax("", "--long-opt", "An option with no short variant"))
integer = registry.register(Option.from_syntax("-i", "--int-arg [ARG]", "Option that takes an int arg"))
required = registry.register(Option.from_syntax("-r", "--required-arg ARG", "An option taking a required argument"))
multi = registry.register(Option.from_syntax("-m", "--multi-arg [ARGS]", "Option that can be repeated"))


if __name__ == '__main__':
    result = registry.run()
    match result.status:
        case Status.ERROR:
            sys.exit(1)
        case Status.HELP | Status.VERSION:
            sys.exit(0)

    if result.is_set(simple):
        print("An option with no args was used")
    if result.is_set(optional):
        print("An option with optional arg %s was used" % result.value(optional))
    if result.is_set(required):
        print("An option with required arg %s was used" % result.value(required))
    if result.is_set(long_only):
        print("An option with only the long opt form was used")
    for value in result.values(multi):
        print("Multi-value arg: %s" % value)
    if result.is_set(integer):
        if str(result.value(integer)).isdigit():
            print("An option which expects an int arg was used: %d" % int(result.value(integer)))
        else:
            print("%s expects a numeric arg" % integer.long, file=sys.stderr)
    for index, argument in enumerate(result.positionals):
        print("Non-option argument %d: %s" % (index, argument))

    pprint(result)
