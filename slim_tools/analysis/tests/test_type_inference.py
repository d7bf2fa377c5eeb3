"""Tests for class resolution and expression inference."""

from slim_tools.analysis.type_inference import infer_type_from_expression, resolve_class_name


class TestResolveClassName:
    def test_tracked_definition_wins(self):
        assert resolve_class_name("sim", {"sim": "Custom"}) == "Custom"

    def test_well_known_instances(self):
        assert resolve_class_name("sim", {}) == "Species"
        assert resolve_class_name("community", {}) == "Community"
        assert resolve_class_name("ind", {}) == "Individual"

    def test_id_conventions(self):
        assert resolve_class_name("p12", {}) == "Subpopulation"
        assert resolve_class_name("m1", {}) == "MutationType"
        assert resolve_class_name("g3", {}) == "GenomicElementType"
        assert resolve_class_name("i2", {}) == "InteractionType"

    def test_unknown(self):
        assert resolve_class_name("foo", {}) is None
        assert resolve_class_name("p1x", {}) is None


class TestInferType:
    def test_subpopulation_creation(self):
        assert infer_type_from_expression('sim.addSubpop("p1", 500)') == "Subpopulation"

    def test_individuals(self):
        assert infer_type_from_expression("p1.individuals") == "Individual"
        assert infer_type_from_expression("p1.sampleIndividuals(5)") == "Individual"

    def test_haplosomes(self):
        assert infer_type_from_expression("inds.haplosomes") == "Haplosome"

    def test_mutations(self):
        assert infer_type_from_expression("sim.mutationsOfType(m1)") == "Mutation"

    def test_initializers(self):
        assert infer_type_from_expression('initializeMutationType("m1", 0.5, "f", 0.0)') == "MutationType"
        assert infer_type_from_expression('initializeInteractionType(1, "xy")') == "InteractionType"

    def test_log_file(self):
        assert infer_type_from_expression('community.createLogFile("out.csv")') == "LogFile"

    def test_numeric_results_are_not_objects(self):
        assert infer_type_from_expression("size(p1.individuals)") is None
        assert infer_type_from_expression("mean(p1.individuals.age)") is None

    def test_arithmetic_is_not_an_object(self):
        assert infer_type_from_expression("p1.individualCount * 2") is None

    def test_logical_functions(self):
        assert infer_type_from_expression("isNULL(x)") is None

    def test_blank(self):
        assert infer_type_from_expression("   ") is None
