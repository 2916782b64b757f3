"""
Classifier -- which IRIs are drawn as ontology classes

Syntactic heuristic, not inference. An IRI is a class when:
  1. it is declared `rdf:type owl:Class`,
  2. it is the subject of an `rdfs:subClassOf` triple, or
  3. it is the named-node object of any other `rdf:type` triple.

owl:Class itself is vocabulary, not a class of the document, so

    ex:Task1 a ex:Task .
    ex:Task a owl:Class .

yields {ex:Task} and never owl:Class, even though rule 3 would match it.
"""

from typing import FrozenSet

from .terms import OWL_CLASS, RDF_TYPE, RDFS_SUBCLASS_OF, QuadIndex


def classes_of(index: QuadIndex) -> FrozenSet[str]:
    classes = set()
    for subject, quads in index.items():
        for quad in quads:
            if quad.predicate == RDF_TYPE:
                if quad.object.value == OWL_CLASS:
                    classes.add(subject)
                elif quad.object.is_named_node:
                    classes.add(quad.object.value)
            elif quad.predicate == RDFS_SUBCLASS_OF:
                classes.add(subject)
    return frozenset(classes)
